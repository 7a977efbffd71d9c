"""Data models flowing through the encoding pipeline."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path

from bindata_core.errors import ConfigError, SourceReadError


@dataclass(frozen=True)
class AssetDescriptor:
    """One input file: its lookup name and where its bytes come from.

    Either *path* or *data* must be given. When both are, *data* is used for
    the content and *path* only for metadata and error messages.
    """

    logical_name: str
    path: Path | None = None
    data: bytes | None = field(default=None, repr=False)
    original_name: str = ""

    def __post_init__(self) -> None:
        if not self.logical_name:
            raise ConfigError("logical_name cannot be empty")
        if self.path is None and self.data is None:
            raise ConfigError(f"asset {self.logical_name!r} has neither path nor data")
        if not self.original_name:
            object.__setattr__(self, "original_name", self.logical_name)
        for name in {self.logical_name, self.original_name}:
            if "" in name.split("/"):
                raise ConfigError(f"asset name {name!r} has an empty path segment")

    @property
    def source(self) -> str:
        """Label used in error messages and the generated header."""
        return str(self.path) if self.path is not None else self.logical_name

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise SourceReadError(self.source, e) from e


@dataclass(frozen=True)
class EncodedAsset:
    """Serialized form of one asset, ready to be placed in generated source."""

    name: str
    original_name: str
    path: str
    literal: str
    size: int
    hash: bytes | None = None
    hash_string: str | None = None
    hash_literal: str | None = None
    mode: int | None = None
    mtime_ns: int | None = None

    @property
    def base_name(self) -> str:
        return posixpath.basename(self.name)
