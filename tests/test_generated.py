"""End-to-end tests: render a module, import it, read assets back."""

from __future__ import annotations

import ast
import gzip
import threading

import pytest

from bindata_core.config.models import EncodingConfig, HashEncoding, HashFormat, OutputConfig
from bindata_core.generator import Generator
from bindata_core.models import AssetDescriptor
from bindata.output import SourceWriter
from bindata.output.writer import format_tree, runtime_source
from bindata_core.tree import AssetTree


CONFIGS = [
    pytest.param({}, id="plain"),
    pytest.param({"compress": True}, id="compress"),
    pytest.param({"compress": True, "decompress_once": True}, id="once"),
    pytest.param({"memcopy": True}, id="memcopy"),
    pytest.param({"compress": True, "memcopy": True, "decompress_once": True}, id="all"),
    pytest.param({"hash_format": HashFormat.unchanged}, id="hash-unchanged"),
    pytest.param({"hash_format": HashFormat.dir}, id="hash-dir"),
    pytest.param(
        {"hash_format": HashFormat.namesuffix, "hash_encoding": HashEncoding.base32},
        id="hash-namesuffix",
    ),
    pytest.param(
        {"hash_format": HashFormat.hashext, "hash_encoding": HashEncoding.base64},
        id="hash-hashext",
    ),
    pytest.param({"wrap_at": 7}, id="narrow"),
]


def _render(files, encoding=None, output=None):
    encoding = encoding or EncodingConfig()
    gen = Generator(encoding)
    gen.extend(AssetDescriptor(logical_name=n, data=d) for n, d in files.items())
    encoded = gen.encode()
    return SourceWriter(encoding, output or OutputConfig()).render(encoded, gen.tree(encoded))


def _embedded_name(module, name: str) -> str:
    try:
        return module.resolve_hashed_name(name)
    except AttributeError:
        return name


# ── Round trip ───────────────────────────────────────────────────────


@pytest.mark.parametrize("options", CONFIGS)
def test_every_asset_reads_back(build_module, sample_files, options):
    module = build_module(sample_files, **options)
    for name, data in sample_files.items():
        got, info = module.fetch(_embedded_name(module, name))
        assert bytes(got) == data
        assert info.size == len(data)
        assert info.original_name == name


@pytest.mark.parametrize("options", CONFIGS)
def test_missing_asset_not_found(build_module, sample_files, options):
    module = build_module(sample_files, **options)
    with pytest.raises(FileNotFoundError) as exc_info:
        module.fetch("missing/file.txt")
    assert str(exc_info.value) == "open missing/file.txt: file does not exist"


def test_names_listed(build_module, sample_files):
    module = build_module(sample_files)
    assert module.asset_names() == sorted(sample_files)


def test_unusual_names(build_module):
    files = {
        'quote"d.txt': b"q",
        "back\\slash/x": b"b",
        "spa ce/ünï.txt": b"u",
        "{braces}.txt": b"{}",
    }
    module = build_module(files, output=OutputConfig(asset_dir=False))
    assert module.asset('quote"d.txt') == b"q"
    assert module.asset("spa ce/ünï.txt") == b"u"
    assert module.asset("{braces}.txt") == b"{}"


def test_empty_asset_set(build_module):
    module = build_module({})
    assert module.asset_names() == []
    with pytest.raises(FileNotFoundError):
        module.list_directory("")


# ── Generated source ─────────────────────────────────────────────────


def test_source_is_valid_python(sample_files):
    ast.parse(_render(sample_files, EncodingConfig(compress=True)))


def test_header_and_sources(sample_files):
    source = _render(sample_files, EncodingConfig(compress=True, memcopy=True))
    lines = source.splitlines()
    assert lines[0] == "# Code generated by bindata. DO NOT EDIT."
    assert "#  compress: true" in lines
    assert "#  memcopy: true" in lines
    assert "#  css/site.css" in lines


def test_rendering_is_deterministic(sample_files):
    cfg = EncodingConfig(compress=True, hash_format=HashFormat.dir)
    assert _render(sample_files, cfg) == _render(sample_files, cfg)


def test_no_dependency_on_bindata(sample_files):
    tree = ast.parse(_render(sample_files, EncodingConfig(compress=True)))
    imported = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            imported.update(a.name.split(".")[0] for a in node.names)
        elif isinstance(node, ast.ImportFrom):
            imported.add(node.module.split(".")[0])
    assert not {m for m in imported if m.startswith("bindata")}


def test_module_docstring(build_module, sample_files):
    module = build_module(sample_files, output=OutputConfig(module_docstring="Web assets."))
    assert module.__doc__ == "Web assets."


def test_runtime_source_has_no_docstring():
    source = runtime_source()
    assert not source.startswith('"""')
    assert "class AssetTable" in source


def test_format_tree_is_literal():
    tree = AssetTree()
    for name in ("a/b", "a/cc/d", "e"):
        tree.insert(name, object())
    assert ast.literal_eval(format_tree(tree)) == tree.to_dict()


def test_compressed_literal_is_gzip(build_module, sample_files):
    module = build_module(sample_files, compress=True)
    info = module.asset_info("index.html")
    assert gzip.decompress(info.data) == sample_files["index.html"]


# ── Access modes ─────────────────────────────────────────────────────


def test_zero_copy_identity(build_module, sample_files):
    module = build_module(sample_files)
    assert module.asset("index.html") is module.asset("index.html")


def test_memcopy_isolated(build_module, sample_files):
    module = build_module(sample_files, memcopy=True)
    data = module.asset("index.html")
    data[:] = b"clobbered"
    assert module.asset("index.html") == sample_files["index.html"]


def test_concurrent_fetch(build_module, sample_files):
    module = build_module(sample_files, compress=True, decompress_once=True)
    errors = []

    def worker():
        try:
            for name, data in sample_files.items():
                assert module.asset(name) == data
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(32)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []


# ── Hashing ──────────────────────────────────────────────────────────


def test_hashed_names(build_module, sample_files):
    module = build_module(sample_files, hash_format=HashFormat.namesuffix, hash_length=8)
    hashed = module.resolve_hashed_name("css/site.css")
    assert hashed.startswith("css/site-")
    assert hashed.endswith(".css")
    assert module.asset_info(hashed).file_hash is not None
    with pytest.raises(FileNotFoundError):
        module.fetch("css/site.css")


def test_unchanged_keeps_names(build_module, sample_files):
    module = build_module(sample_files, hash_format=HashFormat.unchanged)
    assert module.resolve_hashed_name("index.html") == "index.html"
    assert len(module.asset_info("index.html").file_hash) == 64


def test_no_hash_accessor_without_hashing(build_module, sample_files):
    module = build_module(sample_files)
    assert not hasattr(module, "resolve_hashed_name")
    assert module.asset_info("index.html").file_hash is None


# ── Directory listing ────────────────────────────────────────────────


def test_list_directory(build_module, sample_files):
    module = build_module(sample_files)
    assert module.list_directory("") == ["css", "empty.txt", "img", "index.html"]
    assert module.list_directory("img") == ["icons", "logo.png"]
    with pytest.raises(FileNotFoundError):
        module.list_directory("index.html")


def test_list_directory_follows_hashed_names(build_module, sample_files):
    module = build_module(sample_files, hash_format=HashFormat.dir, hash_length=6)
    (hash_dir,) = module.list_directory("css")
    assert module.list_directory(f"css/{hash_dir}") == ["site.css"]


def test_asset_dir_disabled(build_module, sample_files):
    module = build_module(sample_files, output=OutputConfig(asset_dir=False))
    assert not hasattr(module, "list_directory")


# ── Metadata and restore ─────────────────────────────────────────────


def test_metadata_overrides_embedded(build_module, sample_files):
    module = build_module(sample_files, metadata=True, mode=0o640, mod_time=1_700_000_000)
    info = module.asset_info("index.html")
    assert info.mode == 0o640
    assert info.mtime_ns == 1_700_000_000 * 1_000_000_000


def test_restore(build_module, sample_files, tmp_path):
    module = build_module(
        sample_files,
        encoding=EncodingConfig(metadata=True, mode=0o600),
        output=OutputConfig(restore=True),
    )
    out = tmp_path / "restored"
    module.restore_assets(str(out), "img")
    assert (out / "img" / "logo.png").read_bytes() == sample_files["img/logo.png"]
    assert (out / "img" / "icons" / "star.svg").stat().st_mode & 0o777 == 0o600
    assert not (out / "index.html").exists()
