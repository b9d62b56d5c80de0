"""
Command line for rnc.

    rnc <HOST> <PORT> [--json|-j]

Missing or unparseable HOST/PORT prints the usage banner instead of
connecting. Unknown flags are ignored.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import SessionConfig

_FLAGS = ("-j", "--json", "-h", "--help")

USAGE = """Replance - REPL for nc
Usage - rnc <HOST> <PORT> [--json]"""


def show_help() -> None:
    print(USAGE)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rnc", add_help=False, allow_abbrev=False)
    parser.add_argument("host", nargs="?")
    parser.add_argument("port", nargs="?")
    parser.add_argument("-j", "--json", action="store_true",
                        help="Pretty-print inbound data as a stream of JSON values.")
    parser.add_argument("-h", "--help", action="store_true")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None, json_default: bool = False) -> Optional[SessionConfig]:
    """Return the session config, or None when usage should be shown."""
    argv = sys.argv[1:] if argv is None else argv
    # Anything dash-prefixed that is not an exact known flag is dropped here,
    # since argparse exits on forms like -jx or --json=1.
    tokens = [arg for arg in argv if not arg.startswith("-") or arg in _FLAGS]
    args, _unknown = _parser().parse_known_args(tokens)
    if args.help or args.host is None or args.port is None:
        return None

    try:
        return SessionConfig(host=args.host, port=int(args.port), json_mode=args.json or json_default)
    except (ValueError, ValidationError):
        return None
