"""Error taxonomy for generation and run time.

NotFoundError and DecodeError are raised by generated modules, so they are
defined in the embedded runtime and re-exported here.
"""

from __future__ import annotations

from bindata_core.runtime import DecodeError, NotFoundError


class BindataError(Exception):
    """Base class for errors raised while generating an asset module."""


class ConfigError(BindataError, ValueError):
    """Invalid or conflicting generation input, e.g. duplicate asset names."""


class SourceReadError(BindataError):
    """Reading an asset's source bytes failed."""

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        super().__init__(f"read {path}: {cause}")
        self.__cause__ = cause


class EncodingError(BindataError):
    """Compressing an asset failed."""

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        super().__init__(f"encode {path}: {cause}")
        self.__cause__ = cause


__all__ = [
    "BindataError",
    "ConfigError",
    "DecodeError",
    "EncodingError",
    "NotFoundError",
    "SourceReadError",
]
