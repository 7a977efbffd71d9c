"""SourceWriter — assembles encoded assets into a generated Python module."""

from __future__ import annotations

import ast
import inspect
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

import bindata_core.runtime
from bindata_core.config.models import EncodingConfig, OutputConfig
from bindata_core.models import EncodedAsset
from bindata_core.tree import AssetNode, AssetTree

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "bindata.py.j2"
INDENT = "    "


def runtime_source() -> str:
    """Source of bindata_core.runtime without its module docstring."""
    source = inspect.getsource(bindata_core.runtime)
    body = ast.parse(source).body
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
        source = "\n".join(source.splitlines()[body[0].end_lineno:])
    return source.strip("\n") + "\n"


def format_tree(node: AssetNode | AssetTree, depth: int = 1) -> str:
    """Render a tree node as a nested dict literal, keys aligned per level."""
    if isinstance(node, AssetTree):
        node = node.root
    if not node.children:
        return "{}"

    keys = sorted(node.children)
    width = max(len(repr(k)) for k in keys)
    lines = ["{"]
    for key in keys:
        pad = " " * (width - len(repr(key)))
        child = format_tree(node.children[key], depth + 1)
        lines.append(f"{INDENT * (depth + 1)}{key!r}:{pad} {child},")
    lines.append(f"{INDENT * depth}}}")
    return "\n".join(lines)


def _comment(text: str) -> str:
    return text.rstrip().replace("\r", "\\r").replace("\n", "\\n")


def _octal(value: int) -> str:
    return f"0o{value:o}"


class SourceWriter:
    """Renders the generated module and optionally writes it to disk."""

    def __init__(
        self,
        encoding: EncodingConfig,
        output: OutputConfig,
        templates_dir: Path | None = None,
    ) -> None:
        self.encoding = encoding
        self.output = output
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["pyrepr"] = repr
        self._env.filters["octal"] = _octal
        self._env.filters["comment"] = _comment
        self._env.filters["format_tree"] = format_tree

    def render(self, assets: list[EncodedAsset], tree: AssetTree | None = None) -> str:
        if tree is None:
            tree = AssetTree.from_assets(assets)
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(
            opts=self.encoding,
            output=self.output,
            assets=assets,
            tree=tree,
            runtime=runtime_source(),
        )

    def write(
        self,
        assets: list[EncodedAsset],
        tree: AssetTree | None = None,
        *,
        dry_run: bool = False,
    ) -> tuple[Path, str]:
        """Render and write the module to ``output.path``.

        Returns the destination and the rendered source.
        """
        source = self.render(assets, tree)
        dest = Path(self.output.path)

        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest, source

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(source, encoding="utf-8")
        logger.info("wrote %s (%d assets, %d bytes)", dest, len(assets), len(source))
        return dest, source
