"""Resolve a command's input to one in-memory byte buffer."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO

from .errors import InputUnavailable

logger = logging.getLogger(__name__)


class InputResolver:
    """Pick the input for one invocation.

    An explicit ``source`` wins: with ``raw`` it is the literal input,
    otherwise it names a file. Without a source, piped standard input is read.
    An interactive terminal with no source is an error rather than a prompt.
    """

    __slots__ = ("raw", "source", "stdin")

    def __init__(self, source: str | None = None, raw: bool = False, stdin: BinaryIO | None = None) -> None:
        self.source = source
        self.raw = bool(raw)
        self.stdin = stdin

    def resolve(self) -> bytes:
        if self.source is not None:
            if self.raw:
                logger.debug("Using raw argument (%d characters)", len(self.source))
                return self.source.encode("utf-8")
            return self._read_file(Path(self.source))
        return self._read_stdin()

    def _read_file(self, path: Path) -> bytes:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise InputUnavailable(
                "file-unreadable",
                f"Reading from file '{path}', if this is raw input then specify --raw flag ({exc.strerror or exc})",
            ) from exc
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def _read_stdin(self) -> bytes:
        stream = self.stdin
        if stream is None:
            if sys.stdin is None or sys.stdin.isatty():
                raise InputUnavailable(
                    "no-input",
                    "No input source found. You can either pipe the input or specify a file or plaintext",
                )
            stream = sys.stdin.buffer
        data = stream.read()
        if not data:
            raise InputUnavailable("no-input", "Standard input is empty")
        # Piped text ends with a line terminator that is not part of the payload.
        if data.endswith(b"\r\n"):
            data = data[:-2]
        elif data.endswith(b"\n"):
            data = data[:-1]
        logger.debug("Read %d bytes from standard input", len(data))
        return data


def resolve_input(source: str | None = None, raw: bool = False, stdin: BinaryIO | None = None) -> bytes:
    return InputResolver(source, raw, stdin).resolve()
