import re
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# BLAKE2b accepts at most a 64-byte key
MAX_HASH_KEY_SIZE = 64


class HashFormat(str, Enum):
    """How an asset's name is rewritten with its content hash."""

    none = "none"
    unchanged = "unchanged"
    dir = "dir"
    namesuffix = "namesuffix"
    hashext = "hashext"


class HashEncoding(str, Enum):
    """Text encoding applied to the raw hash digest."""

    hex = "hex"
    base32 = "base32"
    base64 = "base64"


# Characters needed for the unpadded text form of a 64-byte BLAKE2b digest
HASH_TEXT_LENGTHS = {
    HashEncoding.hex: 128,
    HashEncoding.base32: 103,
    HashEncoding.base64: 86,
}


class EncodingConfig(BaseModel):
    """Options that shape how each asset is encoded and accessed at run time.

    Immutable for the duration of a generation run.
    """

    model_config = ConfigDict(frozen=True)

    compress: bool = False
    compression_level: int = Field(default=-1, ge=-1, le=9)
    memcopy: bool = False
    decompress_once: bool = False
    metadata: bool = False
    mode: int = Field(default=0, ge=0, le=0o7777)
    mod_time: int = Field(default=0, ge=0)
    hash_format: HashFormat = HashFormat.none
    hash_encoding: HashEncoding = HashEncoding.hex
    hash_length: int = Field(default=16, gt=0)
    hash_key: bytes | None = None
    wrap_at: int = Field(default=96, gt=0)

    @field_validator("hash_key", mode="before")
    @classmethod
    def parse_hash_key(cls, v: object) -> object:
        if isinstance(v, str):
            try:
                return bytes.fromhex(v)
            except ValueError as e:
                raise ValueError(f"hash_key must be a hex string: {e}") from e
        return v

    @field_validator("hash_key")
    @classmethod
    def validate_hash_key(cls, v: bytes | None) -> bytes | None:
        if v is not None and len(v) > MAX_HASH_KEY_SIZE:
            raise ValueError(
                f"hash_key must be at most {MAX_HASH_KEY_SIZE} bytes, got {len(v)}"
            )
        return v

    @model_validator(mode="after")
    def validate_hash_length(self) -> "EncodingConfig":
        available = HASH_TEXT_LENGTHS[self.hash_encoding]
        if self.hash_length > available:
            raise ValueError(
                f"hash_length {self.hash_length} exceeds the {available} characters "
                f"a {self.hash_encoding.value} hash provides"
            )
        return self

    @property
    def hashing(self) -> bool:
        return self.hash_format is not HashFormat.none

    @property
    def renaming(self) -> bool:
        return self.hash_format not in (HashFormat.none, HashFormat.unchanged)

    @property
    def once(self) -> bool:
        """Decompress-once only applies to compressed assets."""
        return self.compress and self.decompress_once


class InputConfig(BaseModel):
    path: str = Field(min_length=1)
    recursive: bool = False


class OutputConfig(BaseModel):
    path: str = "bindata_assets.py"
    asset_dir: bool = True
    restore: bool = False
    module_docstring: str | None = None


class BindataConfig(BaseModel):
    inputs: list[InputConfig] = Field(default_factory=list)
    prefix: str = ""
    ignore: list[str] = Field(default_factory=list)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    workers: int = Field(default=4, gt=0)
    log_level: Literal["debug", "info", "warn", "error"] = "info"

    @field_validator("ignore")
    @classmethod
    def validate_ignore(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid ignore pattern {pattern!r}: {e}") from e
        return v

    @model_validator(mode="after")
    def validate_restore(self) -> "BindataConfig":
        if self.output.restore and not self.output.asset_dir:
            raise ValueError("output.restore requires output.asset_dir")
        return self
