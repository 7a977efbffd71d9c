"""Accessor layer embedded verbatim into every generated asset module.

Generated modules must not depend on bindata, so everything here is
standard library only and lives in this single file.
"""

import errno
import gzip
import os
import posixpath
import threading
import zlib
from datetime import datetime, timezone

_DECODE_ERRORS = (OSError, EOFError, zlib.error)


class NotFoundError(FileNotFoundError):
    """No asset, hashed name or directory exists under the requested name."""

    def __init__(self, path: str, op: str = "open") -> None:
        super().__init__(errno.ENOENT, "file does not exist", path)
        self.op = op
        self.path = path

    def __str__(self) -> str:
        return f"{self.op} {self.path}: file does not exist"


class DecodeError(OSError):
    """An embedded compressed asset could not be decompressed."""

    def __init__(self, path: str, cause: BaseException, op: str = "read") -> None:
        super().__init__(f"{op} {path}: {cause}")
        self.op = op
        self.path = path
        self.cause = cause
        self.__cause__ = cause


def _decompress(data: bytes) -> bytes:
    return gzip.decompress(data)


def _canonical(name: str) -> str:
    return name.replace("\\", "/")


class _Once:
    """Computes a value at most once and shares the outcome with every caller.

    A failure is stored like a value and is never retried.
    """

    __slots__ = ("_lock", "_done", "value", "error")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._done = False
        self.value = None
        self.error = None

    def do(self, func) -> None:
        if self._done:
            return
        with self._lock:
            if self._done:
                return
            try:
                self.value = func()
            except Exception as exc:
                self.error = exc
            self._done = True


class Asset:
    """One embedded file. Also serves as the file info returned by fetch()."""

    __slots__ = ("_path", "_orig", "data", "_size", "_mode", "_mtime_ns", "_hash", "_once")

    def __init__(
        self,
        path: str,
        data: bytes,
        size: int | None = None,
        orig: str | None = None,
        mode: int = 0,
        mtime_ns: int | None = None,
        hash: bytes | None = None,
    ) -> None:
        self._path = path
        self._orig = orig
        self.data = data
        self._size = len(data) if size is None else size
        self._mode = mode
        self._mtime_ns = mtime_ns
        self._hash = hash
        self._once = _Once()

    @property
    def name(self) -> str:
        return posixpath.basename(self._path)

    @property
    def path(self) -> str:
        return self._path

    @property
    def original_name(self) -> str:
        return self._orig if self._orig is not None else self._path

    @property
    def size(self) -> int:
        return self._size

    @property
    def mode(self) -> int:
        return self._mode

    @property
    def mtime_ns(self) -> int | None:
        return self._mtime_ns

    @property
    def mod_time(self) -> datetime | None:
        if self._mtime_ns is None:
            return None
        return datetime.fromtimestamp(self._mtime_ns / 1e9, tz=timezone.utc)

    @property
    def is_dir(self) -> bool:
        return False

    @property
    def file_hash(self) -> bytes | None:
        return self._hash

    def __repr__(self) -> str:
        return f"Asset({self._path!r}, size={self._size})"


class AssetTable:
    """Lookup table over every asset embedded in a generated module."""

    def __init__(
        self,
        assets: dict[str, Asset],
        *,
        compressed: bool = False,
        decompress_once: bool = False,
        memcopy: bool = False,
        hash_names: dict[str, str] | None = None,
        tree: dict | None = None,
    ) -> None:
        self._assets = assets
        self._compressed = compressed
        self._once = compressed and decompress_once
        self._memcopy = memcopy
        self._hash_names = hash_names
        self._tree = tree

    def _lookup(self, name: str) -> Asset:
        try:
            return self._assets[_canonical(name)]
        except KeyError:
            raise NotFoundError(name) from None

    def _read(self, name: str, asset: Asset) -> bytes:
        if not self._compressed:
            return asset.data

        if self._once:
            once = asset._once
            once.do(lambda: _decompress(asset.data))
            if once.error is not None:
                raise DecodeError(name, once.error)
            return once.value

        try:
            return _decompress(asset.data)
        except _DECODE_ERRORS as exc:
            raise DecodeError(name, exc) from exc

    def fetch(self, name: str) -> tuple[bytes | bytearray, Asset]:
        """Return the contents and file info of the named asset.

        Without memcopy the returned bytes may be shared with every other
        caller; with memcopy each call gets its own bytearray.
        """
        asset = self._lookup(name)
        data = self._read(name, asset)
        if self._memcopy:
            return bytearray(data), asset
        return data, asset

    def asset(self, name: str) -> bytes | bytearray:
        return self.fetch(name)[0]

    def asset_info(self, name: str) -> Asset:
        return self._lookup(name)

    def names(self) -> list[str]:
        return sorted(self._assets)

    def resolve_hashed_name(self, name: str) -> str:
        """Map an original (pre-hash) asset name to its embedded name."""
        if self._hash_names is not None:
            try:
                return self._hash_names[_canonical(name)]
            except KeyError:
                pass
        raise NotFoundError(name)

    def list_directory(self, name: str) -> list[str]:
        """Return the names directly below *name* in the embedded tree.

        ``""`` lists the top level. Files, unknown paths and empty
        directories raise NotFoundError.
        """
        node = self._tree
        if node is None:
            raise NotFoundError(name)
        if name != "":
            for part in _canonical(name).split("/"):
                try:
                    node = node[part]
                except KeyError:
                    raise NotFoundError(name) from None
        if not node:
            raise NotFoundError(name)
        return sorted(node)

    def restore_asset(self, directory: str, name: str) -> str:
        """Write one asset below *directory*, keeping its mode and mtime.

        Names that would resolve outside *directory* raise ValueError.
        """
        data, info = self.fetch(name)
        root = os.path.abspath(directory)
        target = os.path.normpath(os.path.join(root, *_canonical(name).split("/")))
        if target == root or os.path.commonpath([root, target]) != root:
            raise ValueError(f"restore {name}: target is outside {directory}")
        os.makedirs(os.path.dirname(target) or ".", exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        if info.mode:
            os.chmod(target, info.mode)
        if info.mtime_ns is not None:
            os.utime(target, ns=(info.mtime_ns, info.mtime_ns))
        return target

    def restore_assets(self, directory: str, name: str) -> list[str]:
        """Restore *name* and, if it is a directory, everything below it."""
        try:
            children = self.list_directory(name)
        except NotFoundError:
            return [self.restore_asset(directory, name)]
        written = []
        for child in children:
            written.extend(
                self.restore_assets(directory, posixpath.join(name, child) if name else child)
            )
        return written

    def reset_cache(self) -> None:
        """Forget every decompress-once result, including stored failures."""
        for asset in self._assets.values():
            asset._once = _Once()
