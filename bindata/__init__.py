"""bindata - embed files as data in generated Python modules."""

from bindata.pipeline import GenerationResult, generate

__version__ = "0.1.0"

__all__ = ["GenerationResult", "generate"]
