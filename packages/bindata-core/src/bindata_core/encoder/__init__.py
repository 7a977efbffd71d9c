"""Content encoding: compression, hashing, renaming and literal output."""

from bindata_core.encoder.encoder import DEFAULT_INDENT, ContentEncoder
from bindata_core.encoder.hashing import compute_hash, encode_hash, rewrite_name
from bindata_core.encoder.literal import LiteralWriter, decode_literal, encode_literal

__all__ = [
    "DEFAULT_INDENT",
    "ContentEncoder",
    "LiteralWriter",
    "compute_hash",
    "decode_literal",
    "encode_hash",
    "encode_literal",
    "rewrite_name",
]
