"""Per-asset encoding: compression, hashing, renaming and serialization."""

from __future__ import annotations

import io
import logging
import zlib

from bindata_core.config.models import EncodingConfig
from bindata_core.encoder.hashing import compute_hash, encode_hash, rewrite_name
from bindata_core.encoder.literal import LiteralWriter, encode_literal
from bindata_core.errors import EncodingError, SourceReadError
from bindata_core.models import AssetDescriptor, EncodedAsset
from bindata_core.pool import GzipCompressor, ObjectPool, buffer_pool, gzip_pool

logger = logging.getLogger(__name__)

# Matches the nesting of ``data=(`` inside the generated asset table
DEFAULT_INDENT = " " * 16


class ContentEncoder:
    """Turns AssetDescriptors into EncodedAssets under one EncodingConfig.

    Safe to share between threads: all scratch state is checked out of the
    pools for the duration of a single encode() call.
    """

    def __init__(
        self,
        config: EncodingConfig,
        indent: str = DEFAULT_INDENT,
        buffers: ObjectPool[io.BytesIO] = buffer_pool,
        compressors: ObjectPool[GzipCompressor] = gzip_pool,
    ) -> None:
        self.config = config
        self.indent = indent
        self._buffers = buffers
        self._compressors = compressors

    def encode(self, descriptor: AssetDescriptor) -> EncodedAsset:
        cfg = self.config
        data = descriptor.read()
        mode, mtime_ns = self._metadata(descriptor)

        if cfg.compress:
            literal = self.compress(data, descriptor.source)
        else:
            literal = encode_literal(data, self.indent, cfg.wrap_at, self._buffers)

        name = descriptor.original_name
        digest = hash_string = hash_literal = None
        if cfg.hashing:
            digest = compute_hash(data, cfg.hash_key)
            hash_string = encode_hash(digest, cfg.hash_encoding, cfg.hash_length)
            name = rewrite_name(descriptor.original_name, hash_string, cfg.hash_format)
            hash_literal = encode_literal(digest, self.indent, cfg.wrap_at, self._buffers)

        logger.debug(
            "encoded %s -> %s (%d bytes, literal %d chars)",
            descriptor.source, name, len(data), len(literal),
        )
        return EncodedAsset(
            name=name,
            original_name=descriptor.original_name,
            path=descriptor.source,
            literal=literal,
            size=len(data),
            hash=digest,
            hash_string=hash_string,
            hash_literal=hash_literal,
            mode=mode,
            mtime_ns=mtime_ns,
        )

    def compress(self, data: bytes, source: str = "<bytes>") -> str:
        """Gzip *data* straight into a wrapped bytes literal."""
        with self._buffers.acquire() as buf, self._compressors.acquire() as gz:
            buf.write(b'b"')
            writer = LiteralWriter(buf, self.indent, self.config.wrap_at)
            gz.reset(writer, self.config.compression_level)
            try:
                gz.write(data)
                gz.close()
            except zlib.error as e:
                raise EncodingError(source, e) from e
            buf.write(b'"')
            return buf.getvalue().decode("ascii")

    def _metadata(self, descriptor: AssetDescriptor) -> tuple[int | None, int | None]:
        """File mode and mtime for the asset, or (None, None) when disabled."""
        cfg = self.config
        if not cfg.metadata:
            return None, None

        mode = cfg.mode or None
        mtime_ns = cfg.mod_time * 1_000_000_000 if cfg.mod_time else None
        if (mode is None or mtime_ns is None) and descriptor.path is not None:
            try:
                st = descriptor.path.stat()
            except OSError as e:
                raise SourceReadError(descriptor.source, e) from e
            if mode is None:
                mode = st.st_mode & 0o7777
            if mtime_ns is None:
                mtime_ns = st.st_mtime_ns
        return mode, mtime_ns
