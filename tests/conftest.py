"""Shared test fixtures for bindata."""

import importlib.util
import itertools
from pathlib import Path

import pytest

from bindata_core.config.models import BindataConfig, EncodingConfig, OutputConfig
from bindata_core.generator import Generator
from bindata_core.models import AssetDescriptor
from bindata.output import SourceWriter

_module_ids = itertools.count()


def import_source(path: Path, source: str):
    """Write *source* to *path* and import it as a fresh module."""
    path.write_text(source, encoding="utf-8")
    spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def sample_files():
    """Logical name -> content, covering nesting, text, binary and empty files."""
    return {
        "index.html": b"<html><body>hi</body></html>\n",
        "css/site.css": b'body { font-family: "Helvetica"; }\n',
        "img/logo.png": bytes(range(256)) * 4,
        "img/icons/star.svg": b"<svg/>",
        "empty.txt": b"",
    }


@pytest.fixture
def build_module(tmp_path):
    """Factory: encode *files* under the given options and import the result."""

    def _build(
        files: dict[str, bytes],
        encoding: EncodingConfig | None = None,
        output: OutputConfig | None = None,
        **encoding_options,
    ):
        encoding = encoding or EncodingConfig(**encoding_options)
        output = output or OutputConfig()
        generator = Generator(encoding)
        generator.extend(
            AssetDescriptor(logical_name=name, data=data) for name, data in files.items()
        )
        encoded = generator.encode()
        source = SourceWriter(encoding, output).render(encoded, generator.tree(encoded))
        return import_source(tmp_path / f"generated_assets_{next(_module_ids)}.py", source)

    return _build


@pytest.fixture
def asset_dir(tmp_path, monkeypatch):
    """An ``assets`` directory under a temp cwd, addressed by relative paths."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    root = tmp_path / "assets"
    (root / "css").mkdir(parents=True)
    (root / "img" / "icons").mkdir(parents=True)
    (root / "index.html").write_bytes(b"<html></html>\n")
    (root / "css" / "site.css").write_bytes(b"body {}\n")
    (root / "img" / "logo.png").write_bytes(bytes(range(256)))
    (root / "img" / "icons" / "star.svg").write_bytes(b"<svg/>")
    (root / ".DS_Store").write_bytes(b"junk")
    return root


@pytest.fixture
def sample_config():
    return BindataConfig()
