"""Locating, reading and validating bindata.yaml."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from bindata_core.config.models import BindataConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG = Path("bindata.yaml")
USER_CONFIG = Path(".bindata") / "config.yaml"

# ${NAME} or ${NAME:-fallback}
_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def config_candidates(cli_path: str | None = None) -> list[Path]:
    """Files consulted by load_config(), highest priority first."""
    candidates = [PROJECT_CONFIG, Path.home() / USER_CONFIG]
    if cli_path:
        candidates.insert(0, Path(cli_path))
    return candidates


def load_config(cli_path: str | None = None) -> BindataConfig:
    """Build the config from the first non-empty candidate file.

    An explicit *cli_path* must exist. Empty files are skipped; with no
    usable file the defaults apply.
    """
    if cli_path and not Path(cli_path).is_file():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_candidates(cli_path):
        if not path.is_file():
            continue
        raw = _read_mapping(path)
        if raw is None:
            logger.debug("skipping empty config %s", path)
            continue
        try:
            config = BindataConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("loaded config from %s", path)
        return config

    return BindataConfig()


def _read_mapping(path: Path) -> dict | None:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: top level must be a mapping")
    return raw


def _substitute(match: re.Match[str]) -> str:
    name, fallback = match.group(1), match.group(2)
    value = os.environ.get(name)
    if value:
        return value
    return fallback or ""


def _expand_env_vars(obj: object) -> object:
    """Replace ${VAR} and ${VAR:-fallback} in every string of a YAML tree."""
    if isinstance(obj, str):
        return _ENV_REF.sub(_substitute, obj)
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    return obj


# Default YAML template for `bindata config init`
DEFAULT_CONFIG_TEMPLATE = """\
# bindata.yaml

# Files and directories to embed
inputs:
  - path: "assets"
    recursive: true
# prefix: "assets/"             # stripped from the front of every asset name
# ignore: ["\\\\.DS_Store$"]      # regular expressions matched against paths

# Encoding
encoding:
  compress: false
  compression_level: -1         # -1 (zlib default) or 0-9
  memcopy: false                # hand out independent copies instead of shared bytes
  decompress_once: false        # cache decompressed bytes (requires compress)
  metadata: false               # embed file mode and modification time
  # mode: 0644                  # override every asset's mode (octal)
  # mod_time: 0                 # override every asset's mtime (unix seconds)
  hash_format: "none"           # none | unchanged | dir | namesuffix | hashext
  hash_encoding: "hex"          # hex | base32 | base64
  hash_length: 16
  # hash_key: "${BINDATA_HASH_KEY}"   # hex, at most 64 bytes
  wrap_at: 96

# Output
output:
  path: "bindata_assets.py"
  asset_dir: true               # emit list_directory()
  restore: false                # emit restore_asset()/restore_assets()

workers: 4

# Logging
log_level: "info"              # debug | info | warn | error
"""
