"""Locate files to embed and describe them as AssetDescriptors."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from bindata_core.config.models import InputConfig
from bindata_core.errors import ConfigError, SourceReadError
from bindata_core.models import AssetDescriptor

logger = logging.getLogger(__name__)


def asset_name(path: Path, prefix: str = "") -> str:
    """Slash-separated asset name for *path* with *prefix* removed."""
    name = path.as_posix()
    if name.startswith("./"):
        name = name[2:]
    if prefix and name.startswith(prefix):
        name = name[len(prefix):]
    return name.lstrip("/")


def _ignored(path: Path, patterns: list[re.Pattern[str]]) -> bool:
    text = path.as_posix()
    return any(p.search(text) for p in patterns)


def find_files(
    path: str | Path,
    recursive: bool = False,
    prefix: str = "",
    ignore: Iterable[str] = (),
) -> list[AssetDescriptor]:
    """Describe the file at *path*, or the files inside the directory at *path*.

    Directory entries are visited in sorted order. Subdirectories are only
    descended into when *recursive* is set. Any path matching one of the
    *ignore* regular expressions is skipped.
    """
    root = Path(path)
    patterns = [re.compile(p) for p in ignore]

    if not root.exists():
        raise SourceReadError(str(root), FileNotFoundError(f"no such file or directory: {root}"))

    if root.is_file():
        if _ignored(root, patterns):
            return []
        return [_describe(root, prefix)]

    found: list[AssetDescriptor] = []
    pending = [root]
    while pending:
        directory = pending.pop(0)
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise SourceReadError(str(directory), e) from e
        subdirs: list[Path] = []
        for entry in entries:
            if _ignored(entry, patterns):
                logger.debug("ignoring %s", entry)
                continue
            if entry.is_dir():
                if recursive:
                    subdirs.append(entry)
            elif entry.is_file():
                found.append(_describe(entry, prefix))
        pending[:0] = subdirs

    logger.debug("found %d files under %s", len(found), root)
    return found


def find_inputs(
    inputs: Iterable[InputConfig],
    prefix: str = "",
    ignore: Iterable[str] = (),
) -> list[AssetDescriptor]:
    """Run find_files() over every configured input, in order."""
    ignore = list(ignore)
    found: list[AssetDescriptor] = []
    for item in inputs:
        found.extend(find_files(item.path, item.recursive, prefix, ignore))
    return found


def _describe(path: Path, prefix: str) -> AssetDescriptor:
    name = asset_name(path, prefix)
    if not name:
        raise ConfigError(f"prefix {prefix!r} leaves no asset name for {path}")
    return AssetDescriptor(logical_name=name, path=path)
