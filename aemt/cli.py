"""Command line interface for inspecting and modifying KKIIDDZZ archives."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from aemt.archive import SECTOR_SIZE, FileType, Kidz
from aemt.audio import split_audio_pack
from aemt.errors import AemtError, OutOfBoundsError
from aemt.hexnum import parse_hex_u16, parse_hex_u32

_ROW = "{:<5} {:<5} {:<10} {:<10} {:<10}"


def _index(text: str) -> int:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise argparse.ArgumentTypeError(f"invalid index: {text!r}")
    return int(digits)


def format_listing(kidz: Kidz, true_bns: bool, decimal: bool) -> List[str]:
    """Render the table of non-empty archive entries."""
    dat_len = kidz.archive_len(FileType.DAT, 0)
    lines = [_ROW.format("No.", "Type", "Offset", "Length", "Metadata")]

    for index, kfile in enumerate(kidz.files):
        if kfile.file_type is FileType.EMPTY:
            continue

        offset = kfile.hed.offset
        if not true_bns and kfile.file_type is FileType.BNS:
            offset -= dat_len // SECTOR_SIZE

        spec = "d" if decimal else "08X"
        tags = ", ".join(str(tag) for tag in kfile.metadata.values())
        lines.append(
            _ROW.format(
                index,
                str(kfile.file_type),
                format(offset, spec),
                format(kfile.hed.length, spec),
                tags,
            )
        )

    return lines


def _cmd_list(args: argparse.Namespace) -> None:
    kidz = Kidz.load(args.directory)
    for line in format_listing(kidz, args.true_bns, args.decimal):
        print(line)


def _cmd_extract(args: argparse.Namespace) -> None:
    kidz = Kidz.load(args.directory)
    with open(args.output, "wb") as output:
        output.write(kidz.get(args.index).data)
    print("File exported")


def _cmd_extract_audio(args: argparse.Namespace) -> None:
    kidz = Kidz.load(args.directory)
    tracks = split_audio_pack(kidz.get(args.index).data)
    if args.track >= len(tracks):
        raise OutOfBoundsError()
    Path(args.output).write_bytes(tracks[args.track])
    print("Audio track exported")


def _cmd_patch(args: argparse.Namespace) -> None:
    kidz = Kidz.load(args.directory)
    kidz.patch(args.index, Path(args.input).read_bytes())
    kidz.store(args.directory)
    print("Archive patched")


def _cmd_swap(args: argparse.Namespace) -> None:
    kidz = Kidz.load(args.directory)
    print(
        f"Swapping data at index {args.index_a} with data at index "
        f"{args.index_b} and vice versa"
    )
    kidz.swap(args.index_a, args.index_b)
    kidz.store(args.directory)
    print("Archive patched")


def _cmd_hedit(args: argparse.Namespace) -> None:
    kidz = Kidz.load(args.directory)
    offset = parse_hex_u32(args.offset)
    length = parse_hex_u16(args.length)
    kidz.hedit(args.index, offset, length)
    kidz.store(args.directory)
    print("Archive patched")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="aemt", description="Inspect and modify KKIIDDZZ archives."
    )
    parser.add_argument("directory", help="The directory where KKIIDDZZ files are located.")
    commands = parser.add_subparsers(dest="command", required=True)

    cmd = commands.add_parser("list", help="List files inside the KKIIDDZZ.DAT archive.")
    cmd.add_argument(
        "--true-bns",
        action="store_true",
        help="Print offsets relative to the DAT start instead of the BNS start.",
    )
    cmd.add_argument("--decimal", action="store_true", help="Print values in decimal.")
    cmd.set_defaults(handler=_cmd_list)

    cmd = commands.add_parser("extract", help="Extract a file from the KKIIDDZZ.DAT archive.")
    cmd.add_argument("index", type=_index, help="Index of the file to be extracted. Starts from 0.")
    cmd.add_argument("output", help="Output file")
    cmd.set_defaults(handler=_cmd_extract)

    cmd = commands.add_parser(
        "patch",
        help="Replace a file inside the KKIIDDZZ.DAT with the given input file.",
    )
    cmd.add_argument("index", type=_index, help="Index of the file to be replaced. Starts from 0.")
    cmd.add_argument("input", help="Input file to be inserted at the specific index.")
    cmd.set_defaults(handler=_cmd_patch)

    cmd = commands.add_parser("swap", help="Swap two files inside the KKIIDDZZ.DAT.")
    cmd.add_argument("index_a", type=_index, help="Index of the first file to be swapped.")
    cmd.add_argument("index_b", type=_index, help="Index of the second file to be swapped.")
    cmd.set_defaults(handler=_cmd_swap)

    cmd = commands.add_parser(
        "hedit",
        help="Raw edit the offset/length pair of an entry in the HED.",
    )
    cmd.add_argument("index", type=_index, help="Index of the file to be modified")
    cmd.add_argument("offset", help="New offset")
    cmd.add_argument("length", help="New length")
    cmd.set_defaults(handler=_cmd_hedit)

    cmd = commands.add_parser(
        "extract-audio", help="Extract ADPCM from a sound pack inside the archive."
    )
    cmd.add_argument("index", type=_index, help="Index of the file that contains audio tracks")
    cmd.add_argument("track", type=_index, help="Number of the track to be extracted")
    cmd.add_argument("output", help="Output file")
    cmd.set_defaults(handler=_cmd_extract_audio)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; return the process exit status."""
    args = build_parser().parse_args(argv)
    try:
        args.handler(args)
    except (AemtError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())