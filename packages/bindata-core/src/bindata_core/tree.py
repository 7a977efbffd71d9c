"""Hierarchical namespace over slash-separated asset names."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from bindata_core.errors import ConfigError, NotFoundError
from bindata_core.models import AssetDescriptor, EncodedAsset


class AssetNode:
    """A path segment: optional leaf payload plus named children."""

    def __init__(self, depth: int = 0) -> None:
        self.depth = depth
        self.asset: Any = None
        self.children: dict[str, AssetNode] = {}

    def child(self, name: str) -> AssetNode:
        """Return the child called *name*, creating it if needed."""
        node = self.children.get(name)
        if node is None:
            node = AssetNode(self.depth + 1)
            self.children[name] = node
        return node

    @property
    def is_leaf(self) -> bool:
        return self.asset is not None

    def to_dict(self) -> dict[str, dict]:
        return {name: node.to_dict() for name, node in sorted(self.children.items())}


class AssetTree:
    """Trie of asset names rooted at the empty path."""

    def __init__(self) -> None:
        self.root = AssetNode()

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    @classmethod
    def build(cls, descriptors: Iterable[AssetDescriptor]) -> AssetTree:
        """Index descriptors by their logical names."""
        tree = cls()
        for descriptor in descriptors:
            tree.insert(descriptor.logical_name, descriptor)
        return tree

    @classmethod
    def from_assets(cls, assets: Iterable[EncodedAsset]) -> AssetTree:
        """Index encoded assets by their final (possibly hashed) names."""
        tree = cls()
        for asset in assets:
            tree.insert(asset.name, asset)
        return tree

    def insert(self, name: str, payload: Any) -> AssetNode:
        node = self.root
        for part in name.split("/"):
            node = node.child(part)
        if node.is_leaf:
            raise ConfigError(f"duplicate asset name: {name!r}")
        node.asset = payload
        return node

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, path: str) -> AssetNode | None:
        """Return the node at *path*, or None if any segment is missing."""
        node = self.root
        if path == "":
            return node
        for part in path.replace("\\", "/").split("/"):
            node = node.children.get(part)
            if node is None:
                return None
        return node

    def list_directory(self, path: str) -> list[str]:
        """Names of the immediate children of *path*, sorted.

        Raises NotFoundError when *path* is unknown or has no children.
        """
        node = self.resolve(path)
        if node is None or not node.children:
            raise NotFoundError(path)
        return sorted(node.children)

    def leaves(self) -> list[Any]:
        """Every attached payload, depth-first in name order."""
        out: list[Any] = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                out.append(node.asset)
            stack.extend(node.children[k] for k in sorted(node.children, reverse=True))
        return out

    def to_dict(self) -> dict[str, dict]:
        """Nested ``{segment: {...}}`` mapping, the shape embedded at run time."""
        return self.root.to_dict()
