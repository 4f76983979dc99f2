"""
Tests for the SFZ generator.
"""

import unittest

from akpconv.errors import ParameterClamped
from akpconv.model import (
    Envelope,
    EnvelopeKind,
    Filter,
    FilterType,
    Keygroup,
    Lfo,
    LfoWaveform,
    Modulation,
    Program,
    Sample,
    Tune,
)
from akpconv.sfz import to_sfz

from akp_builder import full_program, simple_keygroup


def _regions(text):
    """
    Splits an SFZ document into one {opcode: value} dict per region, plus
    the list of comment lines found inside regions.
    """
    regions = []
    comments = []
    current = None
    for line in text.splitlines():
        line = line.strip()
        if line == "<region>":
            current = {}
            regions.append(current)
        elif line.startswith("<"):
            current = None
        elif line.startswith("//"):
            if current is not None:
                comments.append(line)
        elif "=" in line and current is not None:
            key, value = line.split("=", 1)
            current[key] = value
    return regions, comments


class TestSfzStructure(unittest.TestCase):
    def test_single_key_scenario(self):
        text = to_sfz(Program(name="kick", keygroups=(simple_keygroup("kick.wav", 60, 60, cutoff=50),)))
        regions, _ = _regions(text)
        self.assertEqual(len(regions), 1)
        region = regions[0]
        self.assertEqual(region["sample"], "kick.wav")
        self.assertEqual(region["lokey"], "60")
        self.assertEqual(region["hikey"], "60")
        self.assertEqual(region["cutoff"], "632.5")
        self.assertEqual(region["fil_type"], "lpf_2p")

    def test_global_block_and_header(self):
        text = to_sfz(Program(name="My  Program", keygroups=(simple_keygroup(),)))
        lines = text.splitlines()
        self.assertEqual(lines[0], "// My Program")
        self.assertIn("<global>", lines)
        self.assertLess(lines.index("<global>"), lines.index("<region>"))
        self.assertIn("polyphony=64", lines)
        self.assertIn("bend_up=200", lines)
        self.assertIn("bend_down=-200", lines)

    def test_one_region_per_keygroup_in_order(self):
        program = full_program()
        regions, _ = _regions(to_sfz(program))
        self.assertEqual([r["sample"] for r in regions], [kg.sample.path for kg in program.keygroups])
        self.assertEqual([r["lovel"] for r in regions], ["0", "101"])

    def test_output_is_deterministic(self):
        program = full_program()
        self.assertEqual(to_sfz(program), to_sfz(program))

    def test_one_opcode_per_line(self):
        for line in to_sfz(full_program()).splitlines():
            if line and not line.startswith(("//", "<")):
                self.assertEqual(line.count("="), 1, line)


class TestSfzRegions(unittest.TestCase):
    def test_full_keygroup(self):
        regions, _ = _regions(to_sfz(full_program()))
        region = regions[0]
        self.assertEqual(region["transpose"], "-12")
        self.assertEqual(region["tune"], "25")
        self.assertEqual(region["volume"], "-7.20")
        self.assertEqual(region["amp_veltrack"], "50")
        self.assertEqual(region["ampeg_sustain"], "80.0")
        self.assertEqual(region["ampeg_vel2attack"], "-20")
        self.assertEqual(region["ampeg_vel2decay"], "-10")
        self.assertEqual(region["fileg_depth"], "2400")
        self.assertIn("fileg_attack", region)
        self.assertEqual(region["lfo1_wave"], "sine")
        self.assertEqual(region["lfo1_delay"], "1.000")
        self.assertEqual(region["lfo1_fade"], "1.000")
        self.assertEqual(region["lfo2_wave"], "square")
        self.assertNotIn("lfo2_delay", region)
        self.assertEqual(region["cutoff_oncc1"], "4800.0")
        self.assertEqual(region["lfo1_to_pitch"], "2.4")

    def test_zero_envelope(self):
        regions, _ = _regions(to_sfz(full_program()))
        region = regions[1]
        self.assertEqual(region["ampeg_attack"], "0.000")
        self.assertEqual(region["ampeg_decay"], "0.000")
        self.assertEqual(region["ampeg_release"], "0.001")
        self.assertNotIn("ampeg_vel2attack", region)
        self.assertEqual(region["fil_type"], "hpf_2p")
        self.assertEqual(region["cutoff"], "79.6")

    def test_default_amp_envelope(self):
        regions, _ = _regions(to_sfz(Program(keygroups=(Keygroup(sample=Sample("a.wav")),))))
        region = regions[0]
        self.assertEqual(region["ampeg_attack"], "0.001")
        self.assertEqual(region["ampeg_sustain"], "100.0")
        self.assertEqual(region["ampeg_release"], "0.300")
        self.assertNotIn("fil_type", region)
        self.assertNotIn("volume", region)

    def test_filter_off_omits_filter(self):
        kg = simple_keygroup(filter=Filter(FilterType.OFF, 50, 50))
        regions, _ = _regions(to_sfz(Program(keygroups=(kg,))))
        self.assertNotIn("cutoff", regions[0])
        self.assertNotIn("fil_type", regions[0])

    def test_filter_envelope_without_filter(self):
        kg = Keygroup(sample=Sample("a.wav"), filter_env=Envelope(EnvelopeKind.FILTER, 10, 10, 10, 10))
        regions, _ = _regions(to_sfz(Program(keygroups=(kg,))))
        self.assertNotIn("fileg_depth", regions[0])
        self.assertIn("fileg_release", regions[0])

    def test_sample_loop_and_root(self):
        kg = Keygroup(sample=Sample("loop.wav", root_key=48, loop_start=100, loop_end=2000))
        regions, _ = _regions(to_sfz(Program(keygroups=(kg,))))
        region = regions[0]
        self.assertEqual(region["pitch_keycenter"], "48")
        self.assertEqual(region["loop_mode"], "loop_continuous")
        self.assertEqual(region["loop_start"], "100")
        self.assertEqual(region["loop_end"], "2000")

    def test_unknown_loop_is_not_emitted(self):
        regions, _ = _regions(to_sfz(Program(keygroups=(simple_keygroup(),))))
        self.assertNotIn("loop_mode", regions[0])
        self.assertNotIn("pitch_keycenter", regions[0])

    def test_unmapped_modulation_is_a_comment(self):
        kg = simple_keygroup(modulations=(Modulation.from_codes(99, 1, 75), Modulation.from_codes(3, 40, 50)))
        regions, comments = _regions(to_sfz(Program(keygroups=(kg,))))
        self.assertEqual(comments, [
            "// unmapped modulation: source=99 destination=1 amount=50",
            "// unmapped modulation: source=3 destination=40 amount=0",
        ])
        self.assertFalse(any("_to_" in key or "_oncc" in key for key in regions[0]))

    def test_clamped_values_are_reported(self):
        kg = simple_keygroup(filter=Filter(FilterType.LOWPASS, cutoff=200, resonance=0),
                             tune=Tune(level=120))
        warnings = []
        regions, _ = _regions(to_sfz(Program(keygroups=(kg,)), warnings))
        self.assertEqual(regions[0]["cutoff"], "20000.0")
        self.assertEqual({w.name for w in warnings if isinstance(w, ParameterClamped)}, {"cutoff", "level"})

    def test_velocity_tracking_is_clamped(self):
        kg = simple_keygroup(amp_env=Envelope(EnvelopeKind.AMP, velocity_to_level=200))
        warnings = []
        regions, _ = _regions(to_sfz(Program(keygroups=(kg,)), warnings))
        self.assertEqual(regions[0]["amp_veltrack"], "100")
        self.assertEqual([w.name for w in warnings], ["velocity_to_level"])

    def test_lfo_rate_bounds(self):
        kg = simple_keygroup(lfos=(Lfo(LfoWaveform.SAW, rate=100), Lfo(LfoWaveform.RAMP, rate=0)))
        regions, _ = _regions(to_sfz(Program(keygroups=(kg,))))
        self.assertEqual(regions[0]["lfo1_freq"], "30.00")
        self.assertEqual(regions[0]["lfo2_freq"], "0.10")


if __name__ == "__main__":
    unittest.main()
