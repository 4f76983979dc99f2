# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
AKP Converter - Entry points used by the command line and other front ends.

A conversion reads the whole source file, parses it, renders the requested
format and hands the text back. Nothing touches the destination until
write_conversion() is called with a finished result.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from .dspreset import to_dspreset
from .errors import AkpError, ConversionError
from .model import Program
from .parser import parse_program
from .sfz import to_sfz


class OutputFormat(Enum):
    SFZ = "sfz"
    DECENT_SAMPLER = "dspreset"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def label(self) -> str:
        return "SFZ" if self is OutputFormat.SFZ else "Decent Sampler"

    @classmethod
    def parse(cls, text: str) -> "OutputFormat":
        """
        Accepts the format names used on the command line.
        """
        key = text.strip().lower()
        if key == "sfz":
            return cls.SFZ
        if key in ("ds", "dspreset", "decent", "decentsampler"):
            return cls.DECENT_SAMPLER
        raise ValueError(f"Unknown output format: {text!r} (expected sfz or ds)")


_RENDERERS = {
    OutputFormat.SFZ: to_sfz,
    OutputFormat.DECENT_SAMPLER: to_dspreset,
}


@dataclass
class Conversion:
    """
    A finished conversion, ready to be written.
    """
    source: Optional[Path]
    output_format: OutputFormat
    text: str
    output_name: str
    program: Program
    warnings: list = field(default_factory=list)

    @property
    def data(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass
class BatchItem:
    """
    Outcome for one file of a batch: either a conversion or an error.
    """
    source: Path
    conversion: Optional[Conversion] = None
    error: Optional[ConversionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def convert_bytes(data: bytes, output_format: OutputFormat, name: str = "") -> Conversion:
    """
    Converts an in-memory AKP image.

    Raises:
        AkpError: If the data cannot be parsed.
    """
    result = parse_program(data, name=name)
    warnings = list(result.warnings)
    text = _RENDERERS[output_format](result.program, warnings)
    return Conversion(
        source=None,
        output_format=output_format,
        text=text,
        output_name=f"{name or 'program'}{output_format.extension}",
        program=result.program,
        warnings=warnings,
    )


def convert_file(path: Union[str, Path], output_format: OutputFormat) -> Conversion:
    """
    Converts one AKP file.

    Args:
        path: The source .akp file.
        output_format: The format to render.

    Returns:
        The Conversion; output_name is the source name with the format's
        extension.

    Raises:
        ConversionError: Wrapping the AkpError or OSError that stopped the
            conversion, with the source path attached.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
        conversion = convert_bytes(data, output_format, name=path.stem)
    except (AkpError, OSError) as e:
        raise ConversionError(path, e) from e

    conversion.source = path
    conversion.output_name = path.with_suffix(output_format.extension).name
    return conversion


def find_akp_files(directory: Union[str, Path]) -> list[Path]:
    """
    Lists the .akp files directly inside a directory, sorted by name.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(f"'{directory}' is not a directory")
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".akp")


def convert_batch(sources: Union[str, Path, Iterable[Union[str, Path]]],
                  output_format: OutputFormat,
                  max_workers: Optional[int] = None) -> list[BatchItem]:
    """
    Converts several files in parallel.

    Args:
        sources: A directory (all of its .akp files) or an iterable of paths.
        output_format: The format to render.
        max_workers: Thread count, None for the executor default.

    Returns:
        One BatchItem per input, in input order. A failing file never stops
        the others.
    """
    if isinstance(sources, (str, Path)):
        paths = find_akp_files(sources)
    else:
        paths = [Path(p) for p in sources]

    items = [BatchItem(source=p) for p in paths]
    if not items:
        return items

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(convert_file, item.source, output_format): idx
            for idx, item in enumerate(items)
        }
        for future in as_completed(future_to_index):
            item = items[future_to_index[future]]
            try:
                item.conversion = future.result()
            except ConversionError as e:
                item.error = e
            except Exception as e:
                item.error = ConversionError(item.source, e)

    return items


def write_conversion(conversion: Conversion, output_dir: Union[str, Path, None] = None,
                     force: bool = False) -> Path:
    """
    Writes a finished conversion.

    Args:
        conversion: The result to write.
        output_dir: Target directory; defaults to the source file's directory
            (or the current directory for in-memory conversions).
        force: Overwrite an existing file.

    Returns:
        The path written.
    """
    if output_dir is not None:
        directory = Path(output_dir)
    elif conversion.source is not None:
        directory = conversion.source.parent
    else:
        directory = Path(".")

    output_path = directory / conversion.output_name
    if output_path.exists() and not force:
        raise FileExistsError(f"\"{output_path}\" already exists")

    directory.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(conversion.data)
    return output_path
