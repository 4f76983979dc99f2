# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
SFZ Generator - Renders a Program as SFZ text.

Layout: a comment header, one <global> block, then one <region> per keygroup
in program order with one opcode per line.
"""

from .constants import (
    DEFAULT_AMP_ENVELOPE,
    MOD_SOURCE_CC_NUMBERS,
    PITCH_BEND_CENTS,
    SFZ_FILTER_ENVELOPE_DEPTH,
    SFZ_FILTER_TYPES,
    SFZ_NOTE_POLYPHONY,
    SFZ_POLYPHONY,
    TOOL_NAME,
)
from .model import FilterType, Keygroup, Program
from .scaling import (
    cutoff_hz,
    envelope_time,
    format_value,
    lfo_delay_seconds,
    lfo_fade_seconds,
    lfo_rate_hz,
    modulation_amount,
    resonance_db,
    sustain_level,
    velocity_tracking,
    volume_db,
)


def to_sfz(program: Program, warnings=None) -> str:
    """
    Renders the program as an SFZ document.

    Args:
        program: The parsed program.
        warnings: Optional list collecting ParameterClamped warnings.

    Returns:
        The SFZ text. The same program always gives the same text.
    """
    name = " ".join(program.name.split())
    lines = [
        f"// {name}" if name else "// Converted AKP program",
        f"// {len(program.keygroups)} keygroups, generated by {TOOL_NAME}",
        "",
        "<global>",
        f"polyphony={SFZ_POLYPHONY}",
        f"note_polyphony={SFZ_NOTE_POLYPHONY}",
        f"bend_up={PITCH_BEND_CENTS}",
        f"bend_down=-{PITCH_BEND_CENTS}",
        "",
    ]
    for keygroup in program.keygroups:
        lines.extend(_region_lines(keygroup, warnings))
        lines.append("")
    return "\n".join(lines)


def _region_lines(keygroup: Keygroup, warnings) -> list[str]:
    lines = ["<region>"]

    sample = keygroup.sample
    if sample is not None:
        lines.append(f"sample={sample.path}")
        if sample.root_key is not None:
            lines.append(f"pitch_keycenter={sample.root_key}")
        if sample.has_loop:
            lines.append("loop_mode=loop_continuous")
            lines.append(f"loop_start={sample.loop_start}")
            lines.append(f"loop_end={sample.loop_end}")

    lines.append(f"lokey={keygroup.low_key}")
    lines.append(f"hikey={keygroup.high_key}")
    lines.append(f"lovel={keygroup.low_vel}")
    lines.append(f"hivel={keygroup.high_vel}")

    tune = keygroup.tune
    if tune is not None:
        lines.append(f"volume={format_value(volume_db(tune.level, warnings), 'volume_db')}")
        lines.append(f"transpose={tune.semitone}")
        lines.append(f"tune={tune.fine}")

    lines.extend(_amp_envelope_lines(keygroup, warnings))
    lines.extend(_filter_lines(keygroup, warnings))
    lines.extend(_lfo_lines(keygroup, warnings))
    lines.extend(_modulation_lines(keygroup, warnings))
    return lines


def _amp_envelope_lines(keygroup: Keygroup, warnings) -> list[str]:
    env = keygroup.amp_env
    if env is None:
        return [
            "amp_veltrack=100",
            f"ampeg_attack={format_value(DEFAULT_AMP_ENVELOPE['attack'], 'seconds')}",
            f"ampeg_decay={format_value(DEFAULT_AMP_ENVELOPE['decay'], 'seconds')}",
            f"ampeg_sustain={format_value(DEFAULT_AMP_ENVELOPE['sustain'], 'percent')}",
            f"ampeg_release={format_value(DEFAULT_AMP_ENVELOPE['release'], 'seconds')}",
        ]

    veltrack = velocity_tracking(env.velocity_to_level, warnings) if env.velocity_to_level is not None else 100
    lines = [f"amp_veltrack={veltrack}"]
    lines.extend(_envelope_opcodes("ampeg", env, warnings))
    # Faster attack and decay at high velocity
    if env.attack > 10:
        lines.append("ampeg_vel2attack=-20")
    if env.decay > 10:
        lines.append("ampeg_vel2decay=-10")
    return lines


def _envelope_opcodes(prefix: str, env, warnings) -> list[str]:
    return [
        f"{prefix}_attack={format_value(envelope_time(env.attack, 'attack', env.kind, warnings), 'seconds')}",
        f"{prefix}_decay={format_value(envelope_time(env.decay, 'decay', env.kind, warnings), 'seconds')}",
        f"{prefix}_sustain={format_value(sustain_level(env.sustain, warnings) * 100, 'percent')}",
        f"{prefix}_release={format_value(envelope_time(env.release, 'release', env.kind, warnings), 'seconds')}",
    ]


def _filter_lines(keygroup: Keygroup, warnings) -> list[str]:
    lines = []
    filt = keygroup.filter
    if filt is not None and filt.filter_type is not FilterType.OFF:
        lines.append(f"fil_type={SFZ_FILTER_TYPES[filt.filter_type.value]}")
        lines.append(f"cutoff={format_value(cutoff_hz(filt.cutoff, warnings), 'hz')}")
        lines.append(f"resonance={format_value(resonance_db(filt.resonance, filt.filter_type, warnings), 'db')}")
        if keygroup.filter_env is not None:
            lines.append(f"fileg_depth={SFZ_FILTER_ENVELOPE_DEPTH}")

    env = keygroup.filter_env
    if env is not None:
        lines.extend(_envelope_opcodes("fileg", env, warnings))
    return lines


def _lfo_lines(keygroup: Keygroup, warnings) -> list[str]:
    lines = []
    for number, lfo in enumerate(keygroup.lfos, 1):
        lines.append(f"lfo{number}_freq={format_value(lfo_rate_hz(lfo.rate, warnings), 'lfo_hz')}")
        lines.append(f"lfo{number}_wave={lfo.waveform.value}")
        if lfo.delay > 0:
            lines.append(f"lfo{number}_delay={format_value(lfo_delay_seconds(lfo.delay, warnings), 'seconds')}")
        if lfo.fade_in > 0:
            lines.append(f"lfo{number}_fade={format_value(lfo_fade_seconds(lfo.fade_in, warnings), 'seconds')}")
    return lines


def _modulation_lines(keygroup: Keygroup, warnings) -> list[str]:
    lines = []
    for mod in keygroup.modulations:
        if not mod.is_mapped:
            lines.append(
                f"// unmapped modulation: source={mod.source_code} "
                f"destination={mod.destination_code} amount={mod.amount}"
            )
            continue

        value = format_value(modulation_amount(mod.amount, mod.destination, warnings), "modulation")
        cc = MOD_SOURCE_CC_NUMBERS.get(mod.source.value)
        if cc is not None:
            lines.append(f"{mod.destination.value}_oncc{cc}={value}")
        else:
            lines.append(f"{mod.source.value}_to_{mod.destination.value}={value}")
    return lines
