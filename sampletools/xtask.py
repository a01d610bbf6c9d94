"""A small task runner whose ``chat`` command prints the prompt it is given."""

from __future__ import annotations

import argparse

__all__ = ["build_parser", "main"]

_VERSION = "0.0.0"


def _u32(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid digit found in string: {text!r}") from None
    if not 0 <= value <= 2**32 - 1:
        raise argparse.ArgumentTypeError(f"{text} is not in 0..=4294967295")
    return value


def build_parser() -> argparse.ArgumentParser:
    """The command-line parser with its ``chat`` subcommand."""
    parser = argparse.ArgumentParser(prog="xtask")
    parser.add_argument("-V", "--version", action="version", version=f"xtask {_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)

    chat = commands.add_parser("chat")
    chat.add_argument("-u", "--user-id", type=_u32, default=0)
    chat.add_argument("-s", "--session-id", type=_u32, default=0, help="Session id.")
    chat.add_argument("-m", "--mode", default="cmd", help="Model directory.")
    chat.add_argument("-p", "--prompt", default="system")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command named on the command line."""
    args = build_parser().parse_args(argv)
    if args.command == "chat":
        print(args.prompt, end="")
    return 0