from .finder import asset_name, find_files, find_inputs

__all__ = [
    "asset_name",
    "find_files",
    "find_inputs",
]
