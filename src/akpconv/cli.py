# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Command-line interface for akpconv.

Provides subcommands:
- convert: convert one AKP program to SFZ or Decent Sampler
- batch: convert every AKP program in a directory (or a list of files)
- inspect: print the chunk tree of an AKP program

This module exposes small entry functions that can be used as console_scripts
entry points (they must be callables taking no arguments).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .constants import CHUNK_HEADER_SIZE, KEYGROUP_TAG
from .converter import OutputFormat, convert_batch, convert_file, write_conversion
from .errors import AkpError, ConversionError
from .parser import validate_header
from .riff import ChunkReader, iter_chunks


def _format_arg(text):
    try:
        return OutputFormat.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _build_root_parser():
    p = argparse.ArgumentParser(prog="akpconv", description="Convert Akai AKP programs to SFZ or Decent Sampler presets")
    sub = p.add_subparsers(dest="command", required=True)

    c_convert = sub.add_parser("convert", help="Convert a single AKP file")
    c_convert.add_argument("input_file", help="Input AKP file path")
    c_convert.add_argument("output_file", nargs="?", help="Output file path (default: input path with .sfz or .dspreset)")
    c_convert.add_argument("-f", "--format", type=_format_arg, default=OutputFormat.SFZ, help="Output format: sfz or ds (default: sfz)")
    c_convert.add_argument("--force", action="store_true", help="Force overwrite without confirmation")

    c_batch = sub.add_parser("batch", help="Convert all AKP files in a directory, or the given files")
    c_batch.add_argument("inputs", nargs="+", help="A directory, or one or more AKP files")
    c_batch.add_argument("-f", "--format", type=_format_arg, default=OutputFormat.SFZ, help="Output format: sfz or ds (default: sfz)")
    c_batch.add_argument("-o", "--output-directory", help="Write outputs here instead of next to each input")
    c_batch.add_argument("--force", action="store_true", help="Overwrite existing output files")
    c_batch.add_argument("-j", "--jobs", type=int, metavar="N", help="Number of worker threads")

    c_inspect = sub.add_parser("inspect", help="Print the chunk tree of an AKP file")
    c_inspect.add_argument("input_file", help="Input AKP file path")

    return p


def _print_warnings(warnings, indent="  "):
    for warning in warnings:
        print(f"{indent}Warning: {warning}")


def _run_convert(args):
    src = Path(args.input_file)
    fmt = args.format

    print(f"Converting: {src} -> {fmt.label}")
    conversion = convert_file(src, fmt)
    _print_warnings(conversion.warnings)

    out = Path(args.output_file) if args.output_file else src.with_suffix(fmt.extension)

    # Warn if output file exists (unless --force is used)
    if out.exists() and not args.force:
        response = input(f"Warning: \"{out}\" already exists. Overwrite? (y/n): ")
        if response.lower() != "y":
            print("Conversion cancelled.")
            return 0

    conversion.output_name = out.name
    written = write_conversion(conversion, out.parent, force=True)
    print(f"Created: {written} ({len(conversion.program.keygroups)} keygroups)")
    return 0


def _run_batch(args):
    fmt = args.format
    if len(args.inputs) == 1 and Path(args.inputs[0]).is_dir():
        sources = Path(args.inputs[0])
    else:
        sources = [Path(p) for p in args.inputs]

    items = convert_batch(sources, fmt, max_workers=args.jobs)
    if not items:
        print(f"No .akp files found in: {args.inputs[0]}")
        return 0

    print(f"Converting {len(items)} files to {fmt.label}...")
    failures = []
    for item in items:
        if not item.ok:
            failures.append(item)
            print(f"  FAILED  {item.source}: {item.error.cause}")
            continue
        try:
            written = write_conversion(item.conversion, args.output_directory, force=args.force)
        except OSError as e:
            failures.append(item)
            print(f"  FAILED  {item.source}: {e}")
            continue
        print(f"  OK      {item.source} -> {written}")
        _print_warnings(item.conversion.warnings, indent="          ")

    print(f"\nSuccessful: {len(items) - len(failures)}  Failed: {len(failures)}  Total: {len(items)}")
    return 1 if failures else 0


def _hexdump(data, start_offset=0, limit=32):
    """
    Formats up to `limit` bytes as hex dump lines.
    """
    lines = []
    for i in range(0, min(len(data), limit), 16):
        chunk = data[i:i + 16]
        hex_part = " ".join(f"{b:02X}" for b in chunk)
        ascii_part = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)
        lines.append(f"{start_offset + i:08X}  {hex_part:<48}  |{ascii_part}|")
    if len(data) > limit:
        lines.append(f"... ({len(data) - limit} more bytes)")
    return lines


def _print_chunks(reader, indent):
    for chunk in iter_chunks(reader):
        pad = "  " * indent
        print(f"{pad}- {chunk.name!r} (Size: {chunk.size} bytes, Offset: {chunk.offset})")
        if chunk.tag == KEYGROUP_TAG:
            _print_chunks(chunk.payload, indent + 1)
        else:
            payload = chunk.payload.read_bytes(chunk.size)
            for line in _hexdump(payload, chunk.offset + CHUNK_HEADER_SIZE):
                print(f"{pad}    {line}")


def _run_inspect(args):
    src = Path(args.input_file)
    data = src.read_bytes()
    print(f"{src} ({len(data):,} bytes)")
    body = validate_header(ChunkReader(data))
    print(f"- 'RIFF' / 'APRG' (Body: {len(body)} bytes)")
    _print_chunks(body, 1)
    return 0


def main(argv=None):
    """
    Generic entry point for `python -m akpconv` or the `akpconv` script.

    Returns exit code (0 on success).
    """
    argv = list(argv) if argv is not None else None
    parser = _build_root_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "convert":
            return _run_convert(args)
        elif args.command == "batch":
            return _run_batch(args)
        elif args.command == "inspect":
            return _run_inspect(args)
        else:
            parser.print_help()
            return 2
    except (ConversionError, AkpError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
