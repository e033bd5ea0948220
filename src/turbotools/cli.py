"""Command-line entry point: ``turbotools <category> <action> [input] [--raw]``."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys

from . import __version__
from .errors import MalformedInput, TurboToolsError
from .formatting import FormatOpts
from .inputs import InputResolver
from .pipeline import transform
from .utilities import HASH_ALGORITHMS, b64_decode, b64_encode, generate_uuid, hash_digest

logger = logging.getLogger("turbotools")

INDENT_ENV_VAR = "TURBOTOOLS_INDENT"
DEFAULT_INDENT = 2


def _indent_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid indent width: {value!r}") from None
    if size < 0:
        raise argparse.ArgumentTypeError(f"indent width must be >= 0, got {size}")
    return size


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", help="Filename to read from or raw input (must specify --raw)")
    parser.add_argument("--raw", action="store_true", help="Treat INPUT as the literal input instead of a filename")


def _add_format_arguments(parser: argparse.ArgumentParser, default_indent: str) -> None:
    parser.add_argument(
        "--indent",
        type=_indent_size,
        default=default_indent,
        metavar="N",
        help=f"Indent width for pretty output (default: ${INDENT_ENV_VAR} or {DEFAULT_INDENT})",
    )
    parser.add_argument("--tabs", action="store_true", help="Indent with one tab per level (overrides --indent)")


def build_parser() -> argparse.ArgumentParser:
    # argparse runs string defaults through `type`, so a bad environment value
    # surfaces as a normal usage error.
    default_indent = os.environ.get(INDENT_ENV_VAR, str(DEFAULT_INDENT))

    parser = argparse.ArgumentParser(prog="turbotools", description="Small text transformation tools")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="tool", required=True)

    # html / json
    for category, label in (("html", "HTML"), ("json", "JSON")):
        cat = sub.add_parser(category, help=f"Minify or unminify {label}")
        actions = cat.add_subparsers(dest="action", required=True)
        minify = actions.add_parser("minify", help=f"Strip insignificant content from {label}")
        _add_input_arguments(minify)
        minify.set_defaults(func=cmd_format, category=category, context=f"Minify {label}")
        unminify = actions.add_parser("unminify", help=f"Pretty-print {label}")
        _add_input_arguments(unminify)
        _add_format_arguments(unminify, default_indent)
        unminify.set_defaults(func=cmd_format, category=category, context=f"Unminify {label}")

    # b64
    b64 = sub.add_parser("b64", help="Base64 Encoding and Decoding")
    b64_actions = b64.add_subparsers(dest="action", required=True)
    encode = b64_actions.add_parser("encode", help="Encode input as base64")
    _add_input_arguments(encode)
    encode.set_defaults(func=cmd_b64, context="Base64 Encoding")
    decode = b64_actions.add_parser("decode", help="Decode base64 input to UTF-8 text")
    _add_input_arguments(decode)
    decode.set_defaults(func=cmd_b64, context="Base64 Decoding")

    # hash
    hash_parser = sub.add_parser("hash", help="Popular hash functions (MD5, SHA1, SHA256, SHA512, Blake3)")
    algorithms = hash_parser.add_subparsers(dest="action", required=True)
    for algorithm in HASH_ALGORITHMS:
        h = algorithms.add_parser(algorithm, help=f"{algorithm.upper()} hex digest")
        _add_input_arguments(h)
        h.set_defaults(func=cmd_hash, context=f"{algorithm.upper()} Hash")

    # uuid
    u = sub.add_parser("uuid", help="Generate a random UUID (version 4)")
    u.set_defaults(func=cmd_uuid, context="UUID")

    return parser


def _read_input(args: argparse.Namespace) -> bytes:
    return InputResolver(args.input, args.raw).resolve()


def cmd_format(args: argparse.Namespace) -> str:
    opts = None
    if args.action == "unminify":
        opts = FormatOpts(indent_size=1, indent_char="\t") if args.tabs else FormatOpts(indent_size=args.indent)
    return transform(args.category, args.action, _read_input(args), opts)


def cmd_b64(args: argparse.Namespace) -> str:
    data = _read_input(args)
    if args.action == "encode":
        return b64_encode(data).decode("ascii")
    decoded = b64_decode(data)
    try:
        return decoded.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInput("invalid-utf-8", "Decoded data is not valid UTF-8 text") from exc


def cmd_hash(args: argparse.Namespace) -> str:
    return hash_digest(args.action, _read_input(args))


def cmd_uuid(args: argparse.Namespace) -> str:
    return str(generate_uuid())


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    logger.debug("Running %s (%s)", args.tool, args.context)

    try:
        output = args.func(args)
    except TurboToolsError as exc:
        logger.error("%s: %s", args.context, exc)
        return 1

    sys.stdout.write(output)
    sys.stdout.write("\n")
    sys.stdout.flush()
    return 0


def run() -> None:
    # If stdout is a pipe and the reader (e.g. `head`) closes early, exit quietly.
    try:  # pragma: no cover - platform dependent
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
    except (AttributeError, OSError, RuntimeError, ValueError):
        pass
    sys.exit(main())
