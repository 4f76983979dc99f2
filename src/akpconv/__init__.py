# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

from .converter import (
    BatchItem,
    Conversion,
    OutputFormat,
    convert_batch,
    convert_bytes,
    convert_file,
    write_conversion,
)
from .dspreset import to_dspreset
from .parser import ParseResult, parse_program
from .sfz import to_sfz

__all__ = [
    "BatchItem",
    "Conversion",
    "OutputFormat",
    "ParseResult",
    "convert_batch",
    "convert_bytes",
    "convert_file",
    "parse_program",
    "to_dspreset",
    "to_sfz",
    "write_conversion"
]
