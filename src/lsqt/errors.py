"""Exceptions raised while building a transport model.

Every failure during model construction is fatal for the run, but it is
raised rather than exiting so callers and tests can inspect it.
"""
from __future__ import annotations


class ModelBuildError(Exception):
    """Base class for errors raised during model construction."""


class ConfigurationError(ModelBuildError, ValueError):
    """Invalid parameter, enumeration, size, strength or feature combination."""


class InputFileError(ModelBuildError, OSError):
    """An input file is missing or unreadable."""

    def __init__(self, path, reason: str | None = None):
        self.path = str(path)
        message = f"Cannot open input file {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
