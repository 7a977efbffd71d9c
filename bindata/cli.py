"""CLI entry point for bindata."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from bindata_core.config.models import (
    BindataConfig,
    HashEncoding,
    HashFormat,
    InputConfig,
)
from bindata_core.errors import BindataError
from bindata_core.tree import AssetNode, AssetTree

from bindata.config import DEFAULT_CONFIG_TEMPLATE, load_config
from bindata.discovery import find_inputs
from bindata.pipeline import generate as run_generate

app = typer.Typer(
    name="bindata",
    help="Embed files as data in a generated Python module.",
)

config_app = typer.Typer(help="Manage bindata configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: BindataConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _get_config() -> BindataConfig:
    if _config is None:
        return load_config()
    return _config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS[level],
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to bindata.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(_config.log_level)


def _with_overrides(
    cfg: BindataConfig,
    inputs: list[str] | None,
    recursive: bool,
    encoding: dict,
    **top: object,
) -> BindataConfig:
    """Return *cfg* with every CLI flag that was actually given applied."""
    data = cfg.model_dump()
    if inputs:
        data["inputs"] = [InputConfig(path=p, recursive=recursive).model_dump() for p in inputs]
    data["encoding"].update({k: v for k, v in encoding.items() if v is not None})
    for key, value in top.items():
        if value is None:
            continue
        if key in ("path", "asset_dir", "restore"):
            data["output"][key] = value
        else:
            data[key] = value
    return BindataConfig(**data)


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _add_branch(branch: Tree, node: AssetNode) -> None:
    for name in sorted(node.children):
        child = node.children[name]
        if child.is_leaf:
            label = f"[green]{escape(name)}[/green]"
        else:
            label = f"[bold]{escape(name)}/[/bold]"
        _add_branch(branch.add(label), child)


@app.command()
def generate(
    inputs: Annotated[
        list[str] | None, typer.Argument(help="Files or directories to embed")
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Generated module path")
    ] = None,
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Descend into subdirectories"),
    prefix: str | None = typer.Option(None, "--prefix", help="Strip this prefix from asset names"),
    ignore: Annotated[
        list[str] | None, typer.Option("--ignore", help="Regex of paths to skip (repeatable)")
    ] = None,
    compress: bool | None = typer.Option(None, "--compress/--no-compress", help="Gzip asset data"),
    compression_level: int | None = typer.Option(None, "--compression-level", help="-1 or 0-9"),
    memcopy: bool | None = typer.Option(
        None, "--memcopy/--no-memcopy", help="Return independent copies of asset data"
    ),
    decompress_once: bool | None = typer.Option(
        None, "--decompress-once/--decompress-always", help="Cache decompressed data"
    ),
    metadata: bool | None = typer.Option(
        None, "--metadata/--no-metadata", help="Embed file mode and modification time"
    ),
    mode: str | None = typer.Option(None, "--mode", help="Override file mode (octal)"),
    mod_time: int | None = typer.Option(None, "--modtime", help="Override mtime (unix seconds)"),
    hash_format: HashFormat | None = typer.Option(None, "--hash-format", help="Hash-based renaming"),
    hash_encoding: HashEncoding | None = typer.Option(None, "--hash-encoding"),
    hash_length: int | None = typer.Option(None, "--hash-length"),
    hash_key: str | None = typer.Option(None, "--hash-key", help="Hash key as hex"),
    asset_dir: bool | None = typer.Option(
        None, "--asset-dir/--no-asset-dir", help="Emit list_directory()"
    ),
    restore: bool | None = typer.Option(
        None, "--restore/--no-restore", help="Emit restore_asset()/restore_assets()"
    ),
    workers: int | None = typer.Option(None, "--workers", "-j", help="Parallel encoders"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without writing"),
) -> None:
    """Encode files into a Python module."""
    try:
        cfg = _with_overrides(
            _get_config(),
            inputs,
            recursive,
            {
                "compress": compress,
                "compression_level": compression_level,
                "memcopy": memcopy,
                "decompress_once": decompress_once,
                "metadata": metadata,
                "mode": int(mode, 8) if mode is not None else None,
                "mod_time": mod_time,
                "hash_format": hash_format,
                "hash_encoding": hash_encoding,
                "hash_length": hash_length,
                "hash_key": hash_key,
            },
            path=output,
            asset_dir=asset_dir,
            restore=restore,
            prefix=prefix,
            ignore=ignore or None,
            workers=workers,
        )
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not cfg.inputs:
        rprint("[red]Error:[/red] no inputs given (pass paths or set 'inputs' in bindata.yaml)")
        raise typer.Exit(1)

    try:
        result = run_generate(cfg, dry_run=dry_run)
    except BindataError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title=f"Assets ({len(result.assets)})")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    if cfg.encoding.hashing:
        table.add_column("Hash", style="yellow")
    for a in result.assets:
        row = [a.name, _format_size(a.size)]
        if cfg.encoding.hashing:
            row.append(a.hash_string or "")
        table.add_row(*row)
    rprint(table)

    if dry_run:
        rprint(f"[yellow](dry run: {result.output_path} not written)[/yellow]")
    else:
        rprint(f"[green]Wrote:[/green] {result.output_path}")


@app.command("ls")
def list_assets(
    inputs: Annotated[
        list[str] | None, typer.Argument(help="Files or directories to inspect")
    ] = None,
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Descend into subdirectories"),
) -> None:
    """Show the asset tree that would be embedded."""
    cfg = _get_config()
    if inputs:
        sources = [InputConfig(path=p, recursive=recursive) for p in inputs]
    else:
        sources = cfg.inputs

    try:
        descriptors = find_inputs(sources, cfg.prefix, cfg.ignore)
        tree = AssetTree.build(descriptors)
    except BindataError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    root = Tree(f"[bold]Assets[/bold] ({len(descriptors)})")
    _add_branch(root, tree.root)
    rprint(root)


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a commented bindata.yaml into the current directory."""
    dest = Path("bindata.yaml")
    if dest.exists() and not force:
        rprint(f"[yellow]{dest} already exists[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)
    dest.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created:[/green] {dest}")


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration."""
    cfg = _get_config()
    data = cfg.model_dump(mode="json", exclude={"encoding": {"hash_key"}})
    data["encoding"]["hash_key"] = "<redacted>" if cfg.encoding.hash_key else None
    rprint(Syntax(yaml.safe_dump(data, sort_keys=False), "yaml"))


if __name__ == "__main__":
    app()
