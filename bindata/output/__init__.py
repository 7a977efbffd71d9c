"""Output — renders and writes generated asset modules."""

from bindata.output.writer import SourceWriter, format_tree, runtime_source

__all__ = ["SourceWriter", "format_tree", "runtime_source"]
