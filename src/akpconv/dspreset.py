# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Decent Sampler Generator - Renders a Program as a .dspreset XML document.

Document layout:
- ui: one tab of labeled knobs (ADSR, cutoff, resonance) bound to the engine
- groups: one group per keygroup holding its sample and, when the keygroup
  has a filter, a group-level lowpass carrying the scaled cutoff/resonance
- effects: fixed lowpass + reverb chain driven by the knobs
- midi: CC1 cutoff, CC2 resonance, CC7 volume
- modulators: one lfo per keygroup LFO, bound to the cutoff
- tags: program metadata
"""

import re
import xml.etree.ElementTree as ET

from .constants import (
    DEFAULT_AMP_ENVELOPE,
    DS_CC_BINDINGS,
    DS_KNOBS,
    DS_MIN_VERSION,
    DS_REVERB,
    TOOL_NAME,
)
from .errors import GenerationError
from .model import FilterType, Keygroup, Program
from .scaling import (
    cutoff_hz,
    envelope_time,
    format_value,
    lfo_depth,
    lfo_rate_hz,
    resonance_db,
    sustain_level,
    tuning_semitones,
    velocity_tracking,
    volume_db,
)

# Characters XML 1.0 has no way to represent, escaped or not
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def to_dspreset(program: Program, warnings=None) -> str:
    """
    Renders the program as a Decent Sampler preset.

    Args:
        program: The parsed program.
        warnings: Optional list collecting ParameterClamped warnings.

    Returns:
        The XML document text (UTF-8 declaration, two-space indent).

    Raises:
        GenerationError: If a string from the program cannot be written as
            XML at all.
    """
    root = ET.Element("DecentSampler", {"minVersion": DS_MIN_VERSION})
    _add_ui(root)
    _add_groups(root, program, warnings)
    _add_effects(root)
    _add_midi(root)
    _add_modulators(root, program, warnings)
    _add_tags(root, program)

    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def _xml_text(value: str, what: str) -> str:
    match = _XML_ILLEGAL.search(value)
    if match:
        raise GenerationError(
            f"{what} {value!r} contains character U+{ord(match.group()):04X} which XML cannot represent"
        )
    return value


def _add_ui(root):
    ui = ET.SubElement(root, "ui", {"width": "620", "height": "200"})
    tab = ET.SubElement(ui, "tab", {"name": "Main"})
    for index, (label, min_v, max_v, value, bind_type, bind_param) in enumerate(DS_KNOBS):
        knob = ET.SubElement(tab, "labeled-knob", {
            "x": str(10 + index * 100), "y": "20", "width": "90", "height": "100",
            "label": label, "type": "float",
            "minValue": min_v, "maxValue": max_v, "value": value,
            "textColor": "AA000000",
        })
        binding = {"type": bind_type, "level": "instrument", "parameter": bind_param}
        if bind_type == "effect":
            # Effect 0 of the global chain is the lowpass
            binding["position"] = "0"
        ET.SubElement(knob, "binding", binding)


def _add_groups(root, program: Program, warnings):
    groups = ET.SubElement(root, "groups")
    for number, keygroup in enumerate(program.keygroups, 1):
        group = ET.SubElement(groups, "group", {"name": f"Group{number}"})
        _set_amp_envelope(group, keygroup, warnings)
        if keygroup.tune is not None:
            group.set("volume", format_value(volume_db(keygroup.tune.level, warnings), "volume_db"))

        if keygroup.sample is not None:
            _add_sample(group, keygroup)

        filt = keygroup.filter
        if filt is not None and filt.filter_type is not FilterType.OFF:
            effects = ET.SubElement(group, "effects")
            ET.SubElement(effects, "effect", {
                "type": filt.filter_type.value,
                "frequency": format_value(cutoff_hz(filt.cutoff, warnings), "hz"),
                "resonance": format_value(resonance_db(filt.resonance, filt.filter_type, warnings), "db"),
            })


def _set_amp_envelope(group, keygroup: Keygroup, warnings):
    env = keygroup.amp_env
    if env is None:
        group.set("attack", format_value(DEFAULT_AMP_ENVELOPE["attack"], "seconds"))
        group.set("decay", format_value(DEFAULT_AMP_ENVELOPE["decay"], "seconds"))
        group.set("sustain", format_value(DEFAULT_AMP_ENVELOPE["sustain"] / 100, "level"))
        group.set("release", format_value(DEFAULT_AMP_ENVELOPE["release"], "seconds"))
        return

    group.set("attack", format_value(envelope_time(env.attack, "attack", env.kind, warnings), "seconds"))
    group.set("decay", format_value(envelope_time(env.decay, "decay", env.kind, warnings), "seconds"))
    group.set("sustain", format_value(sustain_level(env.sustain, warnings), "level"))
    group.set("release", format_value(envelope_time(env.release, "release", env.kind, warnings), "seconds"))
    if env.velocity_to_level is not None:
        group.set("ampVelTrack", format_value(velocity_tracking(env.velocity_to_level, warnings) / 100, "level"))


def _add_sample(group, keygroup: Keygroup):
    sample = keygroup.sample
    attrs = {
        "path": _xml_text(sample.path, "Sample path"),
        "loNote": str(keygroup.low_key),
        "hiNote": str(keygroup.high_key),
        "loVel": str(keygroup.low_vel),
        "hiVel": str(keygroup.high_vel),
    }
    if sample.root_key is not None:
        attrs["rootNote"] = str(sample.root_key)

    tune = keygroup.tune
    if tune is not None and (tune.semitone or tune.fine):
        attrs["tuning"] = format_value(tuning_semitones(tune.semitone, tune.fine), "semitones")

    if sample.has_loop:
        attrs["loopStart"] = str(sample.loop_start)
        attrs["loopEnd"] = str(sample.loop_end)
        attrs["loopEnabled"] = "true"
    ET.SubElement(group, "sample", attrs)


def _add_effects(root):
    effects = ET.SubElement(root, "effects")
    cutoff_knob = next(k for k in DS_KNOBS if k[5] == "FX_FILTER_FREQUENCY")
    resonance_knob = next(k for k in DS_KNOBS if k[5] == "FX_FILTER_RESONANCE")
    ET.SubElement(effects, "effect", {
        "type": "lowpass",
        "frequency": cutoff_knob[3],
        "resonance": resonance_knob[3],
    })
    ET.SubElement(effects, "effect", {"type": "reverb", **DS_REVERB})


def _add_midi(root):
    midi = ET.SubElement(root, "midi")
    for number, (bind_type, parameter, out_min, out_max) in DS_CC_BINDINGS.items():
        cc = ET.SubElement(midi, "cc", {"number": str(number)})
        binding = {"type": bind_type, "level": "instrument"}
        if bind_type == "effect":
            binding["position"] = "0"
        binding.update({
            "parameter": parameter,
            "translation": "linear",
            "translationOutputMin": out_min,
            "translationOutputMax": out_max,
        })
        ET.SubElement(cc, "binding", binding)


def _add_modulators(root, program: Program, warnings):
    if not any(keygroup.lfos for keygroup in program.keygroups):
        return

    modulators = ET.SubElement(root, "modulators")
    for group_number, keygroup in enumerate(program.keygroups, 1):
        for lfo_number, lfo in enumerate(keygroup.lfos, 1):
            node = ET.SubElement(modulators, "lfo", {
                "name": f"Group{group_number} LFO{lfo_number}",
                "shape": lfo.waveform.value,
                "frequency": format_value(lfo_rate_hz(lfo.rate, warnings), "lfo_hz"),
                "modAmount": format_value(lfo_depth(lfo.depth, warnings), "depth"),
            })
            ET.SubElement(node, "binding", {
                "type": "effect",
                "level": "instrument",
                "position": "0",
                "parameter": "FX_FILTER_FREQUENCY",
                "modBehavior": "add",
                "translation": "linear",
                "translationOutputMin": "0",
                "translationOutputMax": "2000",
            })


def _add_tags(root, program: Program):
    tags = ET.SubElement(root, "tags")
    entries = [
        ("program", _xml_text(program.name, "Program name")),
        ("description", "Converted from AKP format"),
        ("conversion-tool", TOOL_NAME),
    ]
    for name, value in entries:
        ET.SubElement(tags, "tag", {"name": name, "value": value})
