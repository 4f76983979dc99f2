# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Error and warning types raised or collected while converting AKP programs.

Fatal conditions derive from AkpError and stop the conversion of a file.
Advisory conditions derive from AkpWarning; they are never raised, only
collected in a list and handed back with a successful result.
"""


class AkpError(Exception):
    """
    Base class for every fatal AKP conversion error.
    """


class InvalidRiffHeader(AkpError):
    def __init__(self, found: bytes):
        self.found = found
        super().__init__(f"Invalid file format: expected RIFF header, found {found!r}")


class InvalidAprgSignature(AkpError):
    def __init__(self, found: bytes):
        self.found = found
        super().__init__(
            f"Invalid file format: expected APRG signature, found {found!r} (not an Akai program file)"
        )


class UnexpectedEof(AkpError, EOFError):
    """
    A read would run past the end of the available bytes.
    """

    def __init__(self, offset: int, wanted: int, available: int):
        self.offset = offset
        self.wanted = wanted
        self.available = available
        super().__init__(
            f"Unexpected end of data at offset {offset}: wanted {wanted} bytes, {available} available"
        )


class MissingRequiredChunk(AkpError):
    def __init__(self, chunk: str):
        self.chunk = chunk
        super().__init__(f"Missing required '{chunk}' chunk")


class InvalidKeyRange(AkpError):
    def __init__(self, low: int, high: int, offset: int | None = None):
        self.low = low
        self.high = high
        self.offset = offset
        super().__init__(
            f"Invalid key range: low_key ({low}) must be <= high_key ({high}) and both within 0-127"
            + (f" (zone chunk at offset {offset})" if offset is not None else "")
        )


class InvalidVelocityRange(AkpError):
    def __init__(self, low: int, high: int, offset: int | None = None):
        self.low = low
        self.high = high
        self.offset = offset
        super().__init__(
            f"Invalid velocity range: low_vel ({low}) must be <= high_vel ({high}) and both within 0-127"
            + (f" (zone chunk at offset {offset})" if offset is not None else "")
        )


class GenerationError(AkpError):
    """
    Internal defect in an output generator. A valid program should never
    trigger this.
    """


class ConversionError(Exception):
    """
    Wraps the error that stopped the conversion of one source file.
    """

    def __init__(self, source, cause: Exception):
        self.source = source
        self.cause = cause
        super().__init__(f"{source}: {cause}")


class AkpWarning(UserWarning):
    """
    Base class for advisory findings; collected, never raised.
    """


class UnknownChunkType(AkpWarning):
    def __init__(self, tag: bytes, offset: int, size: int):
        self.tag = tag
        self.offset = offset
        self.size = size
        super().__init__(f"Skipping unknown chunk type {tag!r} at offset {offset} ({size} bytes)")


class ParameterClamped(AkpWarning):
    def __init__(self, name: str, value: int, low: int, high: int):
        self.name = name
        self.value = value
        self.low = low
        self.high = high
        super().__init__(f"Parameter '{name}' value {value} outside {low}-{high}, clamped")


class StructureWarning(AkpWarning):
    """
    Odd but survivable program structure (empty sample name, extra envelopes...).
    """
