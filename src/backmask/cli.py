"""CLI for backmask -- reverse WAV files by draining their samples through a stack.

Usage:
    backmask reverse array voice.wav reversed.wav
    backmask reverse list voice.wav reversed.wav --keep
    backmask to-dat voice.wav -o voice.dat
    backmask reverse-dat list voice.dat -o voice_reversed.dat
    backmask list
    python3 -m backmask version
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import wave
from typing import Any

import backmask
from backmask.errors import BackmaskError
from backmask.records import AMPLITUDE_SCALES, dat_to_wav, wav_to_dat
from backmask.reversal import backmask_wav, reverse_dat_file
from backmask.stacks import STACK_TYPES
from backmask.wavio import describe_wav

# =============================================================================
# Stack variants
# =============================================================================

STACK_HELP = {
    "array": "Contiguous buffer, doubles in size when full",
    "list": "Singly-linked nodes, fail-fast iteration",
}

# =============================================================================
# Command registry
# =============================================================================
#
# Each entry maps a CLI command name to:
#   input  - "wav" | "dat"
#   ext    - extension used when the output path is generated
#   stack  - True if the command takes a stack variant argument
#   help   - one-line description

COMMANDS: dict[str, dict[str, Any]] = {
    "reverse": {
        "input": "wav",
        "ext": ".wav",
        "stack": True,
        "help": "Reverse a WAV file (WAV -> dat -> reversed dat -> WAV)",
    },
    "reverse-dat": {
        "input": "dat",
        "ext": ".dat",
        "stack": True,
        "help": "Reverse a dat sample-record file",
    },
    "to-dat": {
        "input": "wav",
        "ext": ".dat",
        "stack": False,
        "help": "Convert a WAV file to a dat sample-record file",
    },
    "from-dat": {
        "input": "dat",
        "ext": ".wav",
        "stack": False,
        "help": "Convert a dat sample-record file to a WAV file",
    },
}


# =============================================================================
# Parser construction
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="backmask",
        description="backmask - reverse audio through a stack",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-v for info, -vv for debug)",
    )

    subparsers = parser.add_subparsers(
        dest="command", title="commands", metavar="<command>"
    )

    for cmd_name, spec in COMMANDS.items():
        sub = subparsers.add_parser(
            cmd_name,
            help=spec["help"],
            description=spec["help"],
        )

        if spec["stack"]:
            sub.add_argument(
                "stack",
                type=str.lower,
                choices=list(STACK_TYPES),
                help="Stack variant used for the reversal",
            )

        input_help = "Input WAV file" if spec["input"] == "wav" else "Input dat file"
        sub.add_argument("input", help=input_help)

        if cmd_name == "reverse":
            sub.add_argument(
                "output",
                nargs="?",
                help="Output WAV file, or directory (auto-names file)",
            )
            sub.add_argument(
                "--keep",
                action="store_true",
                default=False,
                help="Keep the intermediate dat files",
            )
            sub.add_argument(
                "--workdir",
                default=None,
                help="Directory for intermediate dat files "
                "(default: $BACKMASK_WORKDIR or the output directory)",
            )
        else:
            sub.add_argument(
                "-o",
                "--output",
                help="Output file path, or directory (auto-names file)",
            )

        if cmd_name != "reverse-dat":
            sub.add_argument(
                "--amplitude",
                choices=list(AMPLITUDE_SCALES),
                default="raw",
                help="Amplitude convention in dat files (default: raw)",
            )

    subparsers.add_parser("list", description="List available stack variants")
    subparsers.add_parser("version", description="Show version information")

    sub_info = subparsers.add_parser("info", description="Show audio file information")
    sub_info.add_argument("input", help="Input WAV file")

    return parser


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# =============================================================================
# Output path resolution
# =============================================================================


def resolve_output_path(args, cmd_name: str, input_path: str) -> str:
    output = getattr(args, "output", None)
    ext = COMMANDS[cmd_name]["ext"]
    stem = _input_stem(input_path)

    if output:
        if os.path.isdir(output):
            return os.path.join(output, f"{stem}_{cmd_name}{ext}")
        return output

    dirn = os.path.dirname(input_path) or "."
    return os.path.join(dirn, f"{stem}_{cmd_name}{ext}")


def _input_stem(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def _require_file(path: str) -> None:
    if not os.path.exists(path):
        print(f"Error: file not found: {path}", file=sys.stderr)
        sys.exit(1)


# =============================================================================
# Handlers
# =============================================================================


def handle_reverse(args: argparse.Namespace) -> None:
    _require_file(args.input)
    output_path = resolve_output_path(args, "reverse", args.input)
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    result = backmask_wav(
        args.input,
        output_path,
        args.stack,
        keep=args.keep,
        workdir=args.workdir,
        amplitude=args.amplitude,
    )
    print(result.output_path)


def handle_convert(cmd_name: str, args: argparse.Namespace) -> None:
    _require_file(args.input)
    output_path = resolve_output_path(args, cmd_name, args.input)
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

    if cmd_name == "to-dat":
        wav_to_dat(args.input, output_path, args.amplitude)
    elif cmd_name == "from-dat":
        dat_to_wav(args.input, output_path, args.amplitude)
    elif cmd_name == "reverse-dat":
        reverse_dat_file(args.input, output_path, args.stack)
    print(output_path)


# =============================================================================
# Utility command handlers
# =============================================================================


def handle_version() -> None:
    print(f"backmask {backmask.__version__}")


def handle_list() -> None:
    print("stacks:")
    max_name = max(len(name) for name in STACK_HELP)
    for name in STACK_TYPES:
        print(f"  {name:<{max_name}}  {STACK_HELP[name]}")
    print()
    print("commands:")
    max_name = max(len(name) for name in COMMANDS)
    for name, spec in COMMANDS.items():
        print(f"  {name:<{max_name}}  {spec['help']}")


def handle_info(args: argparse.Namespace) -> None:
    _require_file(args.input)
    info = describe_wav(args.input)

    print(f"File:         {info.path}")
    print(f"Duration:     {info.duration:.4f}s")
    print(f"Channels:     {info.channels}")
    print(f"Sample width: {8 * info.sample_width} bit")
    print(f"Sample rate:  {info.sample_rate} Hz")
    print(f"Frames:       {info.frames}")
    print(f"Peak level:   {info.peak}")


# =============================================================================
# Main entry point
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return

    if args.command == "version":
        handle_version()
        return
    if args.command == "list":
        handle_list()
        return

    try:
        if args.command == "info":
            handle_info(args)
        elif args.command == "reverse":
            handle_reverse(args)
        else:
            handle_convert(args.command, args)
    except (BackmaskError, wave.Error, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
