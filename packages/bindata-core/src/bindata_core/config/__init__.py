from .models import (
    BindataConfig,
    EncodingConfig,
    HashEncoding,
    HashFormat,
    InputConfig,
    OutputConfig,
)

__all__ = [
    "BindataConfig",
    "EncodingConfig",
    "HashEncoding",
    "HashFormat",
    "InputConfig",
    "OutputConfig",
]
