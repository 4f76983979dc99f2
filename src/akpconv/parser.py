# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
AKP Parser - Validates the RIFF/APRG container and walks its chunk tree.

The walk is a set of plain functions that receive an explicit ChunkReader
bounded to the chunk being read, plus the list that collects warnings. There
is no parser state beyond that, so independent files can be parsed on
different threads at the same time.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    APRG_TAG,
    ENVELOPE_TAG,
    FILTER_TAG,
    KEYGROUP_TAG,
    LFO_TAG,
    MIDI_MAX,
    MODULATION_TAG,
    PROGRAM_TAG,
    RIFF_TAG,
    SAMPLE_TAG,
    TUNE_TAG,
    ZONE_TAG,
)
from .errors import (
    InvalidAprgSignature,
    InvalidKeyRange,
    InvalidRiffHeader,
    InvalidVelocityRange,
    MissingRequiredChunk,
    StructureWarning,
    UnknownChunkType,
)
from .model import (
    Envelope,
    EnvelopeKind,
    Filter,
    FilterType,
    Keygroup,
    Lfo,
    LfoWaveform,
    Modulation,
    Program,
    ProgramHeader,
    Sample,
    Tune,
)
from .riff import Chunk, ChunkReader, iter_chunks

_LINE_BREAK = re.compile(r"[\r\n]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f]")


class ChunkKind(Enum):
    """
    Every chunk tag the walker understands, plus UNKNOWN for the rest.
    """
    PROGRAM = PROGRAM_TAG
    KEYGROUP = KEYGROUP_TAG
    ZONE = ZONE_TAG
    SAMPLE = SAMPLE_TAG
    TUNE = TUNE_TAG
    FILTER = FILTER_TAG
    ENVELOPE = ENVELOPE_TAG
    LFO = LFO_TAG
    MODULATION = MODULATION_TAG
    UNKNOWN = None

    @classmethod
    def of(cls, tag: bytes) -> "ChunkKind":
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


@dataclass
class ParseResult:
    program: Program
    warnings: list = field(default_factory=list)


def parse_program(data: bytes, name: str = "") -> ParseResult:
    """
    Parses a complete AKP file image into a Program.

    Args:
        data: The whole file contents.
        name: Program name to record (usually the source file stem).

    Returns:
        A ParseResult holding the program and the advisory warnings found.

    Raises:
        AkpError: On the first fatal structural problem. No partial program
            is returned.
    """
    warnings = []
    body = validate_header(ChunkReader(data))

    header = None
    keygroups = []
    for chunk in iter_chunks(body):
        kind = ChunkKind.of(chunk.tag)
        if kind is ChunkKind.PROGRAM:
            header = _parse_program_header(chunk.payload)
        elif kind is ChunkKind.KEYGROUP:
            keygroups.append(_parse_keygroup(chunk, warnings))
        else:
            warnings.append(UnknownChunkType(chunk.tag, chunk.offset, chunk.size))

    if not keygroups:
        raise MissingRequiredChunk("kgrp")
    if not any(kg.sample is not None for kg in keygroups):
        raise MissingRequiredChunk("smpl")

    if header is not None and header.keygroup_count != len(keygroups):
        warnings.append(StructureWarning(
            f"Program header declares {header.keygroup_count} keygroups, found {len(keygroups)}"
        ))

    return ParseResult(Program(name=name, keygroups=tuple(keygroups), header=header), warnings)


def validate_header(reader: ChunkReader) -> ChunkReader:
    """
    Checks the RIFF container and the APRG signature.

    Returns:
        A reader over the chunk stream, bounded by the declared container
        length rather than the physical buffer, so trailing bytes past the
        declared length are never walked.
    """
    riff_id = reader.read_tag()
    if riff_id != RIFF_TAG:
        raise InvalidRiffHeader(riff_id)

    container_size = reader.read_u32()

    form_type = reader.read_tag()
    if form_type != APRG_TAG:
        raise InvalidAprgSignature(form_type)

    # The declared size counts the form type as well
    return reader.sub_reader(max(container_size - 4, 0))


def _field(payload: ChunkReader, offset: int, default=None, signed: bool = False):
    """
    Reads one byte at a fixed payload offset, or returns the default when the
    payload is too short to hold it.
    """
    if offset >= len(payload):
        return default
    payload.seek(offset)
    return payload.read_i8() if signed else payload.read_u8()


def _parse_program_header(payload: ChunkReader) -> ProgramHeader:
    return ProgramHeader(
        midi_program=_field(payload, 1, 0),
        keygroup_count=_field(payload, 2, 0),
    )


def _parse_keygroup(chunk: Chunk, warnings: list) -> Keygroup:
    """
    Walks the sub-chunks of one keygroup.
    """
    fields = {}
    envelopes = []
    lfos = []
    modulations = []

    for sub in iter_chunks(chunk.payload):
        kind = ChunkKind.of(sub.tag)
        if kind is ChunkKind.ZONE:
            fields.update(_parse_zone(sub))
        elif kind is ChunkKind.SAMPLE:
            fields["sample"] = _parse_sample(sub, warnings)
        elif kind is ChunkKind.TUNE:
            fields["tune"] = _parse_tune(sub.payload)
        elif kind is ChunkKind.FILTER:
            fields["filter"] = _parse_filter(sub, warnings)
        elif kind is ChunkKind.ENVELOPE:
            envelopes.append(sub)
        elif kind is ChunkKind.LFO:
            lfos.append(_parse_lfo(sub, warnings))
        elif kind is ChunkKind.MODULATION:
            modulations.append(_parse_modulation(sub.payload))
        else:
            warnings.append(UnknownChunkType(sub.tag, sub.offset, sub.size))

    # The first envelope is the amp envelope, the second the filter envelope
    env_kinds = [EnvelopeKind.AMP, EnvelopeKind.FILTER]
    for index, sub in enumerate(envelopes):
        if index >= len(env_kinds):
            warnings.append(StructureWarning(
                f"Ignoring extra envelope #{index + 1} at offset {sub.offset}"
            ))
            continue
        env = _parse_envelope(sub.payload, env_kinds[index])
        if env.kind is EnvelopeKind.AMP:
            fields["amp_env"] = env
        else:
            fields["filter_env"] = env

    return Keygroup(lfos=tuple(lfos), modulations=tuple(modulations), **fields)


def _parse_zone(chunk: Chunk) -> dict:
    payload = chunk.payload
    low_key = _field(payload, 1, 0)
    high_key = _field(payload, 2, MIDI_MAX)
    low_vel = _field(payload, 3, 0)
    high_vel = _field(payload, 4, MIDI_MAX)

    # A broken range usually means the walk has lost sync, so it is fatal
    if low_key > high_key or high_key > MIDI_MAX:
        raise InvalidKeyRange(low_key, high_key, chunk.offset)
    if low_vel > high_vel or high_vel > MIDI_MAX:
        raise InvalidVelocityRange(low_vel, high_vel, chunk.offset)

    return {
        "low_key": low_key,
        "high_key": high_key,
        "low_vel": low_vel,
        "high_vel": high_vel,
    }


def _parse_sample(chunk: Chunk, warnings: list):
    payload = chunk.payload
    raw_name = b""
    if len(payload) > 2:
        payload.seek(2)
        raw_name = payload.read_bytes(payload.remaining())

    name = raw_name.split(b"\x00", 1)[0].decode("utf-8", errors="replace")
    if "\ufffd" in name:
        warnings.append(StructureWarning(
            f"Sample file name {name!r} at offset {chunk.offset} is not valid UTF-8, replaced undecodable bytes"
        ))

    # A file name ends at the first line break; other control characters are dropped
    cleaned = _CONTROL_CHARS.sub("", _LINE_BREAK.split(name, 1)[0])
    if cleaned != name:
        warnings.append(StructureWarning(
            f"Removed control characters from sample file name {name!r} at offset {chunk.offset}"
        ))

    name = cleaned.strip()
    if not name:
        warnings.append(StructureWarning(f"Empty sample file name in chunk at offset {chunk.offset}"))
        return None
    return Sample.from_source_path(name)


def _parse_tune(payload: ChunkReader) -> Tune:
    defaults = Tune()
    return Tune(
        level=_field(payload, 2, defaults.level),
        semitone=_field(payload, 3, defaults.semitone, signed=True),
        fine=_field(payload, 4, defaults.fine, signed=True),
    )


def _parse_filter(chunk: Chunk, warnings: list) -> Filter:
    payload = chunk.payload
    defaults = Filter()
    type_code = _field(payload, 7, defaults.filter_type.code)
    filter_type = FilterType.from_code(type_code)
    if filter_type is None:
        warnings.append(StructureWarning(
            f"Unknown filter type {type_code} at offset {chunk.offset}, using lowpass"
        ))
        filter_type = FilterType.LOWPASS

    return Filter(
        filter_type=filter_type,
        cutoff=_field(payload, 2, defaults.cutoff),
        resonance=_field(payload, 3, defaults.resonance),
    )


def _parse_envelope(payload: ChunkReader, kind: EnvelopeKind) -> Envelope:
    defaults = Envelope()
    return Envelope(
        kind=kind,
        attack=_field(payload, 2, defaults.attack),
        decay=_field(payload, 3, defaults.decay),
        sustain=_field(payload, 4, defaults.sustain),
        release=_field(payload, 5, defaults.release),
        velocity_to_level=_field(payload, 6),
    )


def _parse_lfo(chunk: Chunk, warnings: list) -> Lfo:
    payload = chunk.payload
    defaults = Lfo()
    wave_code = _field(payload, 5, defaults.waveform.code)
    waveform = LfoWaveform.from_code(wave_code)
    if waveform is None:
        warnings.append(StructureWarning(
            f"Unknown LFO waveform {wave_code} at offset {chunk.offset}, using triangle"
        ))
        waveform = LfoWaveform.TRIANGLE

    delay = _field(payload, 7, defaults.delay)
    return Lfo(
        waveform=waveform,
        rate=_field(payload, 6, defaults.rate),
        delay=delay,
        depth=_field(payload, 8, defaults.depth),
        fade_in=_field(payload, 9, delay),
    )


def _parse_modulation(payload: ChunkReader) -> Modulation:
    return Modulation.from_codes(
        source_code=_field(payload, 1, 0),
        destination_code=_field(payload, 2, 0),
        raw_amount=_field(payload, 3, 50),
    )
