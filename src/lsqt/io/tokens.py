"""Strict positional readers for whitespace-tokenized input files."""
from __future__ import annotations

from pathlib import Path

from ..errors import ConfigurationError, InputFileError


def read_text(path: str | Path) -> str:
    """Return the contents of ``path`` or raise :class:`InputFileError`."""
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as handle:
            return handle.read()
    except OSError as exc:
        raise InputFileError(path, exc.strerror) from exc
    except UnicodeDecodeError as exc:
        raise InputFileError(path, f"not a text file ({exc.reason} at byte {exc.start})") from exc


class TokenReader:
    """Sequential reader over the whitespace-separated tokens of one file.

    Line breaks are insignificant; every ``next_*`` call consumes exactly one
    token and raises :class:`ConfigurationError` naming the file when the
    stream is exhausted or the token does not parse.
    """

    def __init__(self, text: str, source: str):
        self._tokens = text.split()
        self._pos = 0
        self.source = source

    @classmethod
    def from_file(cls, path: str | Path) -> "TokenReader":
        return cls(read_text(path), str(path))

    def _next(self, what: str) -> str:
        if self._pos >= len(self._tokens):
            raise ConfigurationError(
                f"{self.source}: unexpected end of file while reading {what}"
            )
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def next_int(self, what: str) -> int:
        token = self._next(what)
        try:
            return int(token)
        except ValueError as exc:
            raise ConfigurationError(
                f"{self.source}: expected an integer for {what}, got {token!r}"
            ) from exc

    def next_float(self, what: str) -> float:
        token = self._next(what)
        try:
            return float(token)
        except ValueError as exc:
            raise ConfigurationError(
                f"{self.source}: expected a real number for {what}, got {token!r}"
            ) from exc

    def next_ints(self, count: int, what: str) -> list[int]:
        return [self.next_int(what) for _ in range(count)]

    def next_floats(self, count: int, what: str) -> list[float]:
        return [self.next_float(what) for _ in range(count)]
