"""Main CLI entry point for kindpack."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional

from .. import __version__
from ..codec import decode_value, encode
from ..config import CodecOptions
from ..exceptions import KindpackError
from ..models.fields import MAX_UINT64, BigInt
from ..utils.trace import configure_tracing, tracing_from_env
from .analyze import inspect_object


def _from_json(value: Any) -> Any:
    """Mark integers too wide for a varint as BigInt."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value > MAX_UINT64:
        return BigInt(value)
    if isinstance(value, list):
        return [_from_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _from_json(item) for key, item in value.items()}
    return value


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the kindpack CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="kindpack: Canonical Binary Encoding for Structured Values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kindpack --encode '{"name": "a"}'      Encode JSON, print hex
  kindpack --decode 200a06...            Decode hex, print JSON
  kindpack --inspect 200a06...           Show packed object layout
  kindpack --version                      Show version

Environment:
  KINDPACK_VERBOSE, KINDPACK_MAX_DEPTH, KINDPACK_STRICT_BOOLEANS,
  KINDPACK_STRICT_ARRAY_LENGTH
        """,
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--encode",
        metavar="JSON",
        type=str,
        help="Encode a JSON object or array and print the bytes as hex",
    )
    group.add_argument(
        "--decode",
        metavar="HEX",
        type=str,
        help="Decode hex bytes and print the value as JSON",
    )
    group.add_argument(
        "--inspect",
        metavar="HEX",
        type=str,
        help="Show the header and field layout of an encoded packed object",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Trace encode/decode steps to stderr",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"kindpack {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose or tracing_from_env():
        configure_tracing()

    try:
        options = CodecOptions.from_env()

        # Handle --encode
        if args.encode is not None:
            value = _from_json(json.loads(args.encode))
            print(encode(value, options).hex())
            return 0

        # Handle --decode
        if args.decode is not None:
            value = decode_value(bytes.fromhex(args.decode), options=options)
            print(json.dumps(value, ensure_ascii=False))
            return 0

        # Handle --inspect
        if args.inspect is not None:
            inspect_object(bytes.fromhex(args.inspect), options)
            return 0
    except (KindpackError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
