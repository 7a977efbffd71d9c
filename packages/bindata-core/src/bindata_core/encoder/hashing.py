"""Content hashing and hash-based asset renaming."""

from __future__ import annotations

import base64
import hashlib
import posixpath

from bindata_core.config.models import HashEncoding, HashFormat


def compute_hash(content: bytes, key: bytes | None = None) -> bytes:
    """BLAKE2b-512 digest of *content*, keyed when *key* is given."""
    return hashlib.blake2b(content, key=key or b"").digest()


def encode_hash(digest: bytes, encoding: HashEncoding, length: int) -> str:
    """Text form of *digest*, cut to exactly *length* characters.

    Raises ValueError when the encoded digest is shorter than *length*.
    """
    if encoding is HashEncoding.hex:
        text = digest.hex()
    elif encoding is HashEncoding.base32:
        text = base64.b32hexencode(digest).decode("ascii").rstrip("=").lower()
    elif encoding is HashEncoding.base64:
        text = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    else:
        raise ValueError(f"unknown hash encoding: {encoding!r}")
    if length > len(text):
        raise ValueError(
            f"hash length {length} exceeds the {len(text)} characters of a "
            f"{encoding.value} digest"
        )
    return text[:length]


def rewrite_name(name: str, hash_string: str, fmt: HashFormat) -> str:
    """Apply *fmt* to *name* using *hash_string*.

    >>> rewrite_name("a/b.txt", "deadbeef", HashFormat.namesuffix)
    'a/b-deadbeef.txt'
    """
    if fmt in (HashFormat.none, HashFormat.unchanged):
        return name

    directory, base = posixpath.split(name)
    if fmt is HashFormat.dir:
        return posixpath.join(directory, hash_string, base)
    if fmt is HashFormat.namesuffix:
        root, ext = posixpath.splitext(base)
        return posixpath.join(directory, f"{root}-{hash_string}{ext}")
    if fmt is HashFormat.hashext:
        return posixpath.join(directory, f"{base}.{hash_string}")
    raise ValueError(f"unknown hash format: {fmt!r}")
