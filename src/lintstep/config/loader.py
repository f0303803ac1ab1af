"""Load and merge configuration from .lintstep.toml and env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from lintstep.config.schema import (
    DirectivesConfig,
    DisplayConfig,
    LintStepConfig,
    ReviewConfig,
    ToolConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".lintstep.toml"

_TRUTHY = ("1", "true", "yes")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(project_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = project_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    unknown = set(raw) - valid_fields
    if unknown:
        logger.debug("Ignoring unknown keys in [%s]: %s", section, ", ".join(sorted(unknown)))
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: LintStepConfig) -> None:
    if cfg.review.context_lines < 0:
        raise ConfigError("review.context_lines must be >= 0")
    if cfg.tool.timeout <= 0:
        raise ConfigError("tool.timeout must be > 0")
    for name in ("disable_line", "disable_file_start", "disable_file_end"):
        if "{rule_id}" not in getattr(cfg.directives, name):
            raise ConfigError(f"directives.{name} must contain '{{rule_id}}'")


def _merge_env_overrides(cfg: LintStepConfig) -> None:
    """Apply LINTSTEP_* environment variable overrides."""
    if val := os.environ.get("LINTSTEP_BINARY"):
        cfg.tool.binary = val
    if val := os.environ.get("LINTSTEP_TIMEOUT"):
        try:
            cfg.tool.timeout = int(val)
        except ValueError:
            logger.warning("Ignoring non-integer LINTSTEP_TIMEOUT=%r", val)
    if val := os.environ.get("LINTSTEP_USE_SERVER"):
        cfg.tool.use_server = val.lower() in _TRUTHY
    if val := os.environ.get("LINTSTEP_UNSAFE_RULES"):
        cfg.review.unsafe_rules.extend(r.strip() for r in val.split(",") if r.strip())


def load_config(
    project_root: Path,
    config_override: Optional[str] = None,
) -> LintStepConfig:
    """Load, validate, and return a LintStepConfig."""
    config_path = find_config_file(project_root, config_override)

    if config_path is None:
        cfg = LintStepConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = LintStepConfig(
                version=raw.get("version", "1.0"),
                tool=_build_section(raw, ToolConfig, "tool"),
                review=_build_section(raw, ReviewConfig, "review"),
                display=_build_section(raw, DisplayConfig, "display"),
                directives=_build_section(raw, DirectivesConfig, "directives"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
        logger.debug("Loaded config from %s", config_path)

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
