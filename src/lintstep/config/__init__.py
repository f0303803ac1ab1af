"""Configuration loading, schema, and defaults."""

from lintstep.config.loader import ConfigError, load_config
from lintstep.config.schema import LintStepConfig

__all__ = [
    "ConfigError",
    "LintStepConfig",
    "load_config",
]
