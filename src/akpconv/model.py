# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
In-memory model of one Akai program.

The parser builds it once; both generators read it. Every record is frozen
and holds raw source values only, unit conversion is left to the scaler.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import (
    FILTER_TYPE_CODES,
    LFO_WAVEFORM_CODES,
    MIDI_MAX,
    MOD_DESTINATION_CODES,
    MOD_SOURCE_CODES,
)


class FilterType(Enum):
    OFF = "off"
    LOWPASS = "lowpass"
    BANDPASS = "bandpass"
    HIGHPASS = "highpass"

    @classmethod
    def from_code(cls, code: int) -> Optional["FilterType"]:
        name = FILTER_TYPE_CODES.get(code)
        return cls(name) if name is not None else None

    @property
    def code(self) -> int:
        return _code_of(FILTER_TYPE_CODES, self.value)


class LfoWaveform(Enum):
    TRIANGLE = "triangle"
    SINE = "sine"
    SQUARE = "square"
    SAW = "saw"
    RAMP = "ramp"
    RANDOM = "random"

    @classmethod
    def from_code(cls, code: int) -> Optional["LfoWaveform"]:
        name = LFO_WAVEFORM_CODES.get(code)
        return cls(name) if name is not None else None

    @property
    def code(self) -> int:
        return _code_of(LFO_WAVEFORM_CODES, self.value)


class EnvelopeKind(Enum):
    AMP = "amp"
    FILTER = "filter"


class ModSource(Enum):
    LFO1 = "lfo1"
    MODWHEEL = "modwheel"
    AFTERTOUCH = "aftertouch"
    KEY = "key"
    KEYGATE = "keygate"
    VELOCITY = "vel"
    LFO2 = "lfo2"
    PITCHBEND = "pitchbend"
    CHANNEL_PRESSURE = "chanpress"
    POLY_PRESSURE = "polypress"
    BREATH = "breath"
    FOOT = "foot"
    EXPRESSION = "expression"
    UNMAPPED = "unmapped"

    @classmethod
    def from_code(cls, code: int) -> "ModSource":
        name = MOD_SOURCE_CODES.get(code)
        return cls(name) if name is not None else cls.UNMAPPED


class ModDestination(Enum):
    PITCH = "pitch"
    CUTOFF = "cutoff"
    RESONANCE = "resonance"
    VOLUME = "volume"
    PAN = "pan"
    LFO1_FREQ = "lfo1_freq"
    LFO2_FREQ = "lfo2_freq"
    AMP_ATTACK = "ampeg_attack"
    AMP_DECAY = "ampeg_decay"
    AMP_SUSTAIN = "ampeg_sustain"
    AMP_RELEASE = "ampeg_release"
    FILTER_ATTACK = "fileg_attack"
    FILTER_DECAY = "fileg_decay"
    FILTER_SUSTAIN = "fileg_sustain"
    FILTER_RELEASE = "fileg_release"
    AMP_LFO_DEPTH = "amplfo_depth"
    FILTER_LFO_DEPTH = "fillfo_depth"
    PITCH_LFO_DEPTH = "pitchlfo_depth"
    UNMAPPED = "unmapped"

    @classmethod
    def from_code(cls, code: int) -> "ModDestination":
        name = MOD_DESTINATION_CODES.get(code)
        return cls(name) if name is not None else cls.UNMAPPED


def _code_of(table, name):
    for code, value in table.items():
        if value == name:
            return code
    raise KeyError(name)


@dataclass(frozen=True)
class ProgramHeader:
    midi_program: int = 0
    keygroup_count: int = 0


@dataclass(frozen=True)
class Sample:
    path: str
    root_key: Optional[int] = None
    loop_start: Optional[int] = None
    loop_end: Optional[int] = None

    @classmethod
    def from_source_path(cls, path: str, **kwargs) -> "Sample":
        """
        Builds a Sample with the path's separators normalized to "/".
        """
        return cls(path.replace("\\", "/"), **kwargs)

    @property
    def has_loop(self) -> bool:
        return self.loop_start is not None and self.loop_end is not None


@dataclass(frozen=True)
class Tune:
    level: int = 85
    semitone: int = 0
    fine: int = 0


@dataclass(frozen=True)
class Filter:
    filter_type: FilterType = FilterType.LOWPASS
    cutoff: int = 100
    resonance: int = 0


@dataclass(frozen=True)
class Envelope:
    kind: EnvelopeKind = EnvelopeKind.AMP
    attack: int = 0
    decay: int = 50
    sustain: int = 100
    release: int = 30
    velocity_to_level: Optional[int] = None


@dataclass(frozen=True)
class Lfo:
    waveform: LfoWaveform = LfoWaveform.TRIANGLE
    rate: int = 0
    delay: int = 0
    depth: int = 0
    fade_in: int = 0


@dataclass(frozen=True)
class Modulation:
    source: ModSource
    destination: ModDestination
    amount: int
    source_code: int
    destination_code: int

    @classmethod
    def from_codes(cls, source_code: int, destination_code: int, raw_amount: int) -> "Modulation":
        """
        Builds a routing from the raw source/destination codes and the raw
        0-100 amount byte, which is centred on 50.
        """
        return cls(
            source=ModSource.from_code(source_code),
            destination=ModDestination.from_code(destination_code),
            amount=raw_amount * 2 - 100,
            source_code=source_code,
            destination_code=destination_code,
        )

    @property
    def is_mapped(self) -> bool:
        return self.source is not ModSource.UNMAPPED and self.destination is not ModDestination.UNMAPPED


@dataclass(frozen=True)
class Keygroup:
    low_key: int = 0
    high_key: int = MIDI_MAX
    low_vel: int = 0
    high_vel: int = MIDI_MAX
    sample: Optional[Sample] = None
    tune: Optional[Tune] = None
    filter: Optional[Filter] = None
    amp_env: Optional[Envelope] = None
    filter_env: Optional[Envelope] = None
    lfos: tuple[Lfo, ...] = ()
    modulations: tuple[Modulation, ...] = ()


@dataclass(frozen=True)
class Program:
    name: str = ""
    keygroups: tuple[Keygroup, ...] = field(default_factory=tuple)
    header: Optional[ProgramHeader] = None
