"""bindata core - asset encoding pipeline and embedded runtime accessors."""

from bindata_core.config import BindataConfig, EncodingConfig, HashEncoding, HashFormat
from bindata_core.encoder import ContentEncoder, decode_literal, encode_literal
from bindata_core.errors import (
    BindataError,
    ConfigError,
    DecodeError,
    EncodingError,
    NotFoundError,
    SourceReadError,
)
from bindata_core.generator import Generator
from bindata_core.models import AssetDescriptor, EncodedAsset
from bindata_core.tree import AssetNode, AssetTree

__version__ = "0.1.0"

__all__ = [
    "AssetDescriptor",
    "AssetNode",
    "AssetTree",
    "BindataConfig",
    "BindataError",
    "ConfigError",
    "ContentEncoder",
    "DecodeError",
    "EncodedAsset",
    "EncodingConfig",
    "EncodingError",
    "Generator",
    "HashEncoding",
    "HashFormat",
    "NotFoundError",
    "SourceReadError",
    "decode_literal",
    "encode_literal",
]
