from .loader import DEFAULT_CONFIG_TEMPLATE, config_candidates, load_config

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "config_candidates",
    "load_config",
]
