"""End-to-end generation: discover, encode, assemble, write."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from bindata_core.config.models import BindataConfig
from bindata_core.generator import Generator
from bindata_core.models import AssetDescriptor, EncodedAsset
from bindata_core.tree import AssetTree

from bindata.discovery import find_inputs
from bindata.output import SourceWriter

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    output_path: Path
    source: str
    assets: list[EncodedAsset] = field(default_factory=list)
    tree: AssetTree = field(default_factory=AssetTree)


def generate(
    config: BindataConfig,
    descriptors: list[AssetDescriptor] | None = None,
    *,
    dry_run: bool = False,
) -> GenerationResult:
    """Build the asset module described by *config*.

    *descriptors* replaces file discovery when given.
    """
    if descriptors is None:
        descriptors = find_inputs(config.inputs, config.prefix, config.ignore)

    generator = Generator(config.encoding, workers=config.workers)
    generator.extend(descriptors)
    logger.info("encoding %d assets with %d workers", len(generator), config.workers)

    encoded = generator.encode()
    tree = generator.tree(encoded)

    writer = SourceWriter(config.encoding, config.output)
    path, source = writer.write(encoded, tree, dry_run=dry_run)
    return GenerationResult(output_path=path, source=source, assets=encoded, tree=tree)
