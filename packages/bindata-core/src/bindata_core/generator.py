"""Collects asset descriptors and encodes them, concurrently if asked."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from bindata_core.config.models import EncodingConfig
from bindata_core.encoder import ContentEncoder
from bindata_core.errors import ConfigError
from bindata_core.models import AssetDescriptor, EncodedAsset
from bindata_core.tree import AssetTree

logger = logging.getLogger(__name__)


class Generator:
    """Ordered set of assets for one generation run.

    Logical names must be unique; adding a second descriptor under an
    existing name raises ConfigError.
    """

    def __init__(
        self,
        config: EncodingConfig,
        workers: int = 1,
        encoder: ContentEncoder | None = None,
    ) -> None:
        self.config = config
        self.workers = workers
        self.encoder = encoder or ContentEncoder(config)
        self._descriptors: dict[str, AssetDescriptor] = {}

        if config.hash_key and not config.hashing:
            logger.warning("hash_key is set but hash_format is 'none'; the key is unused")
        if config.decompress_once and not config.compress:
            logger.warning("decompress_once has no effect without compress")

    def add(self, descriptor: AssetDescriptor) -> None:
        name = descriptor.logical_name
        if name in self._descriptors:
            existing = self._descriptors[name].source
            raise ConfigError(
                f"duplicate asset name {name!r} from {descriptor.source} and {existing}"
            )
        self._descriptors[name] = descriptor

    def extend(self, descriptors: Iterable[AssetDescriptor]) -> None:
        for descriptor in descriptors:
            self.add(descriptor)

    @property
    def descriptors(self) -> list[AssetDescriptor]:
        return list(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def encode(self) -> list[EncodedAsset]:
        """Encode every asset, preserving insertion order.

        The first failing asset aborts the run with its error.
        """
        descriptors = self.descriptors
        if self.workers > 1 and len(descriptors) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                encoded = list(pool.map(self.encoder.encode, descriptors))
        else:
            encoded = [self.encoder.encode(d) for d in descriptors]

        seen: dict[str, str] = {}
        for asset in encoded:
            if asset.name in seen:
                raise ConfigError(
                    f"assets {seen[asset.name]!r} and {asset.original_name!r} "
                    f"both encode to {asset.name!r}"
                )
            seen[asset.name] = asset.original_name

        logger.info(
            "encoded %d assets (%d bytes)", len(encoded), sum(a.size for a in encoded)
        )
        return encoded

    def tree(self, encoded: Iterable[EncodedAsset]) -> AssetTree:
        """Directory tree over the final names of *encoded*."""
        return AssetTree.from_assets(encoded)
