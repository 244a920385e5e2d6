"""YAML/dict config loader for pobox-check.

Supports loading from a YAML file or a plain dict (for embedding in a
larger service config).

Example YAML:

    pobox:
      remainder_scope: leading     # "leading" or "anywhere"
      max_length: 1024
      # Replace a default list entirely ...
      whitelist:
        - '\\bPf\\b\\.?[\\s-]+(?=[^\\W\\d_])'
      # ... or keep the defaults and add to them
      extra_blacklist:
        - '\\bApartado\\b'
      extra_whitelist:
        - '\\bPostweg\\b'
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any

from .classifier import Classifier, ClassifierConfig, REMAINDER_SCOPES
from .patterns import DEFAULT_BLACKLIST, DEFAULT_WHITELIST
from .types import ConfigError

logger = logging.getLogger(__name__)


def _pattern_list(data: dict[str, Any], key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key!r} must be a list of pattern strings")
    return value


def load_config(data: dict[str, Any] | None) -> ClassifierConfig:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "pobox" key or flat
    if "pobox" in data:
        data = data["pobox"] or {}
    if not isinstance(data, dict):
        raise ConfigError("config must be a mapping")

    blacklist = _pattern_list(data, "blacklist")
    whitelist = _pattern_list(data, "whitelist")
    blacklist = list(DEFAULT_BLACKLIST) if blacklist is None else list(blacklist)
    whitelist = list(DEFAULT_WHITELIST) if whitelist is None else list(whitelist)
    blacklist += _pattern_list(data, "extra_blacklist") or []
    whitelist += _pattern_list(data, "extra_whitelist") or []

    scope = data.get("remainder_scope", "leading")
    if scope not in REMAINDER_SCOPES:
        raise ConfigError(f"remainder_scope must be one of {REMAINDER_SCOPES}, got {scope!r}")

    max_length = data.get("max_length", 1024)
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 1:
        raise ConfigError(f"max_length must be a positive integer, got {max_length!r}")

    return ClassifierConfig(
        blacklist=blacklist,
        whitelist=whitelist,
        remainder_scope=scope,
        max_length=max_length,
    )


def load_from_yaml(path: str | Path) -> ClassifierConfig:
    """Load config from a YAML file."""
    import yaml
    path = Path(path).expanduser()
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: {e}") from e
    logger.debug("loaded config from %s", path)
    return load_config(data)


def create_classifier(config: ClassifierConfig | dict[str, Any] | None = None) -> Classifier:
    """Create a fully configured classifier from a config object or dict."""
    if config is None or isinstance(config, dict):
        config = load_config(config)
    return Classifier(config)
