"""YAML configuration for the analyzer.

Settings are read from a small YAML file, by default the first of
``./.svreg.yaml`` and ``~/.svreg.yaml`` that exists::

    syntax_binary: verible-verilog-syntax
    search_paths:
      - ~/tools/verible/bin
    timeout: 60
    extensions: [.v, .sv, .svh]
    jobs: 4
    cache:
      enabled: true
      size: 500
      ttl: 3600
    logging:
      level: INFO

Directories listed under ``search_paths`` are searched before the
built-in ones.  Two environment variables take precedence over the
file: ``SVREG_VERIBLE_PATH`` (the syntax binary) and
``SVREG_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".svreg.yaml"

DEFAULT_SEARCH_PATHS = [
    "~/.local/bin",
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/usr/bin",
]

DEFAULT_EXTENSIONS = [".v", ".sv"]

_KNOWN_KEYS = {
    "syntax_binary", "search_paths", "timeout", "extensions", "jobs", "cache", "logging",
}


@dataclass
class AnalyzerConfig:
    """Settings shared by the tree sources, the cache and the analyzer."""

    syntax_binary: str = "verible-verilog-syntax"
    search_paths: List[str] = field(default_factory=lambda: list(DEFAULT_SEARCH_PATHS))
    timeout: float = 30.0
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    jobs: int = 1
    cache_enabled: bool = True
    cache_size: int = 500
    cache_ttl: float = 3600.0
    log_level: Optional[str] = None
    source_file: Optional[str] = None


def discover_config_file() -> Optional[str]:
    """Return the first existing default configuration file."""
    for candidate in (
        os.path.join(os.getcwd(), CONFIG_FILENAME),
        os.path.join(os.path.expanduser("~"), CONFIG_FILENAME),
    ):
        if os.path.isfile(candidate):
            return candidate
    return None


def load_config(path: Optional[str] = None) -> AnalyzerConfig:
    """Build an :class:`AnalyzerConfig` from YAML and the environment.

    Args:
        path: Explicit configuration file.  When omitted the default
            locations are searched and a missing file is not an error.

    Raises:
        ConfigError: If ``path`` does not exist, the YAML is malformed
            or a value has the wrong type.
    """
    if path is not None and not os.path.isfile(path):
        raise ConfigError(f"Configuration file not found: {path}")

    config = AnalyzerConfig()
    config_file = path or discover_config_file()
    if config_file:
        _apply(config, _load_yaml(config_file))
        config.source_file = config_file
        logger.info("Loaded configuration from %s", config_file)

    env_binary = os.environ.get("SVREG_VERIBLE_PATH")
    if env_binary:
        config.syntax_binary = env_binary
    env_level = os.environ.get("SVREG_LOG_LEVEL")
    if env_level:
        config.log_level = env_level.upper()
    return config


def _load_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load YAML config '{path}': {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _apply(config: AnalyzerConfig, data: Dict[str, Any]) -> None:
    for key in sorted(set(data) - _KNOWN_KEYS):
        logger.warning("Ignoring unknown configuration key: %s", key)

    if "syntax_binary" in data:
        config.syntax_binary = _expect(data, "syntax_binary", str)
    if "search_paths" in data:
        config.search_paths = _expect_list(data, "search_paths") + config.search_paths
    if "timeout" in data:
        config.timeout = float(_expect(data, "timeout", (int, float)))
    if "extensions" in data:
        config.extensions = [
            ext if ext.startswith(".") else f".{ext}"
            for ext in _expect_list(data, "extensions")
        ]
    if "jobs" in data:
        config.jobs = max(1, _expect(data, "jobs", int))

    cache = data.get("cache") or {}
    if not isinstance(cache, dict):
        raise ConfigError("'cache' must be a mapping")
    if "enabled" in cache:
        config.cache_enabled = _expect(cache, "enabled", bool)
    if "size" in cache:
        config.cache_size = _expect(cache, "size", int)
        if config.cache_size < 1:
            raise ConfigError("'cache.size' must be at least 1")
    if "ttl" in cache:
        config.cache_ttl = float(_expect(cache, "ttl", (int, float)))
        if config.cache_ttl < 0:
            raise ConfigError("'cache.ttl' must not be negative")

    log_section = data.get("logging") or {}
    if not isinstance(log_section, dict):
        raise ConfigError("'logging' must be a mapping")
    if "level" in log_section:
        config.log_level = _expect(log_section, "level", str).upper()


def _expect(section: Dict[str, Any], key: str, types: Any) -> Any:
    value = section[key]
    # bool is an int subclass; only accept it where bool is asked for
    if isinstance(value, bool) and types is not bool:
        raise ConfigError(f"'{key}' has invalid value {value!r}")
    if not isinstance(value, types):
        raise ConfigError(f"'{key}' has invalid value {value!r}")
    return value


def _expect_list(section: Dict[str, Any], key: str) -> List[str]:
    value = section[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)
