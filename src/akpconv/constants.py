# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
AKP Constants - Chunk tags, code tables and scaling calibration

Shared by the parser, the parameter scaler and both generators.
"""

# Container
RIFF_TAG = b"RIFF"
APRG_TAG = b"APRG"
CHUNK_HEADER_SIZE = 8

# Program-level chunks
PROGRAM_TAG = b"prg "
KEYGROUP_TAG = b"kgrp"

# Keygroup-level chunks
ZONE_TAG = b"zone"
SAMPLE_TAG = b"smpl"
TUNE_TAG = b"tune"
FILTER_TAG = b"filt"
ENVELOPE_TAG = b"env "
LFO_TAG = b"lfo "
MODULATION_TAG = b"mods"

MIDI_MAX = 127
RAW_MIN = 0
RAW_MAX = 100

# Filter type code -> name (0 = no filter)
FILTER_TYPE_CODES = {
    0: "off",
    1: "lowpass",
    2: "bandpass",
    3: "highpass",
}

# LFO waveform code -> name
LFO_WAVEFORM_CODES = {
    0: "triangle",
    1: "sine",
    2: "square",
    3: "saw",
    4: "ramp",
    5: "random",
}

# Modulation source code -> name
MOD_SOURCE_CODES = {
    0: "lfo1",
    1: "modwheel",
    2: "aftertouch",
    3: "key",
    4: "keygate",
    5: "vel",
    6: "lfo2",
    7: "pitchbend",
    8: "chanpress",
    9: "polypress",
    10: "breath",
    11: "foot",
    12: "expression",
}

# Modulation destination code -> name
MOD_DESTINATION_CODES = {
    0: "pitch",
    1: "cutoff",
    2: "resonance",
    3: "volume",
    4: "pan",
    5: "lfo1_freq",
    6: "lfo2_freq",
    7: "ampeg_attack",
    8: "ampeg_decay",
    9: "ampeg_sustain",
    10: "ampeg_release",
    11: "fileg_attack",
    12: "fileg_decay",
    13: "fileg_sustain",
    14: "fileg_release",
    15: "amplfo_depth",
    16: "fillfo_depth",
    17: "pitchlfo_depth",
}

# Unit scale applied to a normalized modulation depth, per destination.
# pitch: semitones, cutoff/fillfo: cents, resonance/volume: dB,
# pan/sustain/amplfo: percent, lfo freqs: Hz, envelope times: seconds,
# pitchlfo: cents
MOD_DESTINATION_SCALES = {
    "pitch": 12.0,
    "cutoff": 9600.0,
    "resonance": 40.0,
    "volume": 60.0,
    "pan": 100.0,
    "lfo1_freq": 20.0,
    "lfo2_freq": 20.0,
    "ampeg_attack": 10.0,
    "ampeg_decay": 10.0,
    "ampeg_sustain": 100.0,
    "ampeg_release": 10.0,
    "fileg_attack": 10.0,
    "fileg_decay": 10.0,
    "fileg_sustain": 100.0,
    "fileg_release": 10.0,
    "amplfo_depth": 100.0,
    "fillfo_depth": 9600.0,
    "pitchlfo_depth": 1200.0,
}

# Sources that are plain MIDI continuous controllers
MOD_SOURCE_CC_NUMBERS = {
    "modwheel": 1,
    "breath": 2,
    "foot": 4,
    "expression": 11,
}

# Envelope time curve: seconds = ENVELOPE_TIME_BASE * exp(raw / 100 * k)
ENVELOPE_TIME_BASE = 0.001
ENVELOPE_CURVES = {
    ("amp", "attack"): 4.0,
    ("amp", "decay"): 4.0,
    ("amp", "release"): 5.0,
    ("filter", "attack"): 5.0,
    ("filter", "decay"): 5.0,
    ("filter", "release"): 6.0,
}

CUTOFF_MIN_HZ = 20.0
CUTOFF_MAX_HZ = 20000.0

# Resonance ceiling in dB per filter type
RESONANCE_MAX_DB = {
    "off": 40.0,
    "lowpass": 40.0,
    "bandpass": 24.0,
    "highpass": 40.0,
}

LFO_RATE_MIN_HZ = 0.1
LFO_RATE_MAX_HZ = 30.0
LFO_DELAY_MAX_SECONDS = 10.0
LFO_FADE_MAX_SECONDS = 5.0

VOLUME_MIN_DB = -60.0
VOLUME_MAX_DB = 6.0

# Decimal places per printed quantity; both generators format through these
VALUE_PRECISION = {
    "seconds": 3,
    "level": 3,
    "percent": 1,
    "hz": 1,
    "lfo_hz": 2,
    "db": 1,
    "volume_db": 2,
    "semitones": 2,
    "depth": 2,
    "modulation": 1,
}

# Defaults for keygroups without an amp envelope (seconds / percent)
DEFAULT_AMP_ENVELOPE = {
    "attack": 0.001,
    "decay": 0.1,
    "sustain": 100.0,
    "release": 0.3,
}

SFZ_FILTER_TYPES = {
    "lowpass": "lpf_2p",
    "bandpass": "bpf_2p",
    "highpass": "hpf_2p",
}

# 2 octaves, in cents
SFZ_FILTER_ENVELOPE_DEPTH = 2400
SFZ_POLYPHONY = 64
SFZ_NOTE_POLYPHONY = 1
PITCH_BEND_CENTS = 200

DS_MIN_VERSION = "1.0.0"
TOOL_NAME = "akpconv"

# Knobs exposed in the Decent Sampler UI:
# (label, min, max, default, binding type, binding parameter)
DS_KNOBS = [
    ("Attack", "0", "5", "0.1", "amp", "ENV_ATTACK"),
    ("Decay", "0", "5", "0.5", "amp", "ENV_DECAY"),
    ("Sustain", "0", "1", "0.7", "amp", "ENV_SUSTAIN"),
    ("Release", "0", "10", "0.3", "amp", "ENV_RELEASE"),
    ("Cutoff", "20", "20000", "20000", "effect", "FX_FILTER_FREQUENCY"),
    ("Resonance", "0", "40", "0", "effect", "FX_FILTER_RESONANCE"),
]

# MIDI CC -> (binding type, binding parameter, output min, output max)
DS_CC_BINDINGS = {
    1: ("effect", "FX_FILTER_FREQUENCY", "20", "20000"),
    2: ("effect", "FX_FILTER_RESONANCE", "0", "40"),
    7: ("amp", "AMP_VOLUME", "0", "1"),
}

DS_REVERB = {
    "roomSize": "0.5",
    "damping": "0.5",
    "wetLevel": "0.3",
}
