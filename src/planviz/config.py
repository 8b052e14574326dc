"""
Configuration system for planviz.

Environment variables are the primary config source, with an optional
JSON config file for local use.

Usage:
    from planviz.config import get_config

    config = get_config()
    config.theme                      # Theme.LIGHT
    config.is_rule_enabled("NESTED_LOOP")

Environment variables:
    PLANVIZ_CONFIG_FILE               Path to a JSON config file
    PLANVIZ_THEME                     light | dark
    PLANVIZ_SEQ_SCAN_ROW_THRESHOLD    Rows above which a Seq Scan is flagged
    PLANVIZ_HASH_COST_THRESHOLD       Self cost above which a Hash is flagged
    PLANVIZ_MERMAID_CLI               Mermaid CLI executable (default "mmdc")
    PLANVIZ_RENDER_TIMEOUT_SECONDS    Timeout for one render call
    PLANVIZ_MAX_INPUT_SIZE_MB         Parser input size limit
    PLANVIZ_MAX_NODES                 Parser node count limit
    PLANVIZ_RULE_<RULE_ID>_ENABLED    Enable/disable a warning rule
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from planviz.exceptions import ConfigurationError
from planviz.models import Theme
from planviz.parser.config import ParserConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLANVIZ_"


class RuleSettings(BaseModel):
    """Configuration for a single warning rule."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Whether the rule is enabled")


class Config(BaseModel):
    """planviz configuration, loaded from environment variables or a JSON file."""

    model_config = ConfigDict(frozen=True)

    theme: Theme = Field(
        default=Theme.LIGHT,
        description="Diagram color theme",
    )

    # Warning thresholds: fixed constants, never derived from plan data
    seq_scan_row_threshold: int = Field(
        default=10_000,
        ge=0,
        description="Row count above which a Seq Scan produces a warning",
    )
    hash_cost_threshold: float = Field(
        default=50.0,
        ge=0,
        description="Self cost above which a Hash step produces a warning",
    )

    rules: dict[str, RuleSettings] = Field(
        default_factory=dict,
        description="Per-rule settings keyed by rule ID",
    )

    # External renderer
    mermaid_cli: str = Field(
        default="mmdc",
        description="Mermaid CLI executable used to render diagrams",
    )
    render_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single render call",
    )

    # Parser limits
    max_input_size_mb: float = Field(
        default=10.0,
        gt=0,
        description="Maximum plan text size in megabytes",
    )
    max_nodes: int = Field(
        default=50_000,
        gt=0,
        description="Maximum number of plan nodes",
    )

    def is_rule_enabled(self, rule_id: str) -> bool:
        """Check if a rule is enabled. Rules are enabled by default."""
        settings = self.rules.get(rule_id)
        return settings.enabled if settings else True

    def parser_config(self) -> ParserConfig:
        """Parser limits derived from this configuration."""
        return ParserConfig(
            max_input_size_mb=self.max_input_size_mb,
            max_nodes=self.max_nodes,
        )


def _parse_env_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Could not parse %s=%s, using %s", key, value, default)
        return default


def _parse_env_float(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Could not parse %s=%s, using %s", key, value, default)
        return default


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables.

    Unparseable numeric values fall back to their defaults with a warning.

    Raises:
        ConfigurationError: If a parsed value violates a field constraint
    """
    config_kwargs: dict[str, Any] = {
        "theme": Theme.from_string(os.environ.get(f"{ENV_PREFIX}THEME")),
        "seq_scan_row_threshold": _parse_env_int(
            f"{ENV_PREFIX}SEQ_SCAN_ROW_THRESHOLD", 10_000
        ),
        "hash_cost_threshold": _parse_env_float(
            f"{ENV_PREFIX}HASH_COST_THRESHOLD", 50.0
        ),
        "mermaid_cli": os.environ.get(f"{ENV_PREFIX}MERMAID_CLI", "mmdc"),
        "render_timeout_seconds": _parse_env_float(
            f"{ENV_PREFIX}RENDER_TIMEOUT_SECONDS", 30.0
        ),
        "max_input_size_mb": _parse_env_float(
            f"{ENV_PREFIX}MAX_INPUT_SIZE_MB", 10.0
        ),
        "max_nodes": _parse_env_int(f"{ENV_PREFIX}MAX_NODES", 50_000),
    }

    rules: dict[str, RuleSettings] = {}
    rule_prefix = f"{ENV_PREFIX}RULE_"
    for key, value in os.environ.items():
        if key.startswith(rule_prefix) and key.endswith("_ENABLED"):
            rule_id = key[len(rule_prefix):-len("_ENABLED")]
            if rule_id:
                rules[rule_id] = RuleSettings(enabled=_parse_env_bool(value, True))
    config_kwargs["rules"] = rules

    return _build_config(config_kwargs)


def load_config_from_file(path: Path) -> Config:
    """
    Load configuration from a JSON file.

    Falls back to environment variables if the file does not exist.

    Raises:
        ConfigurationError: If the file is not valid JSON or has invalid values
    """
    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read config file {path}: {e}",
            config_key=f"{ENV_PREFIX}CONFIG_FILE",
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a JSON object",
            config_key=f"{ENV_PREFIX}CONFIG_FILE",
        )

    return _build_config(data)


def _build_config(data: dict[str, Any]) -> Config:
    try:
        return Config(**data)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"])
        raise ConfigurationError(
            f"Invalid configuration value for '{key}': {first['msg']}",
            config_key=key,
        ) from e


@lru_cache(maxsize=1)
def get_config() -> Config:
    """
    Get the global configuration instance.

    Loads from PLANVIZ_CONFIG_FILE if set, otherwise from the environment.
    Result is cached for the lifetime of the process.
    """
    config_file = os.environ.get(f"{ENV_PREFIX}CONFIG_FILE")

    if config_file:
        return load_config_from_file(Path(config_file))

    return load_config_from_env()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()
