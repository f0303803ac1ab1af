"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from lintstep.config.loader import ConfigError, load_config
from lintstep.config.schema import LintStepConfig


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.tool.binary == "rubocop"
        assert cfg.review.context_lines == 2
        assert cfg.display.show_patch is True
        assert cfg.directives.disable_line == " # rubocop:disable {rule_id}"

    def test_custom_toml(self, tmp_path: Path):
        toml_path = tmp_path / ".lintstep.toml"
        toml_path.write_text(
            'version = "1.0"\n'
            '[tool]\n'
            'binary = "bundle-rubocop"\n'
            'use_server = true\n'
            '[review]\n'
            'context_lines = 4\n'
            'unsafe_rules = ["Style/FrozenStringLiteralComment"]\n'
            '[display]\n'
            'confirm_patch = true\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.tool.binary == "bundle-rubocop"
        assert cfg.tool.use_server is True
        assert cfg.review.context_lines == 4
        assert cfg.review.unsafe_rules == ["Style/FrozenStringLiteralComment"]
        assert cfg.display.confirm_patch is True

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".lintstep.toml").write_text('[tool]\nbinary = "rc"\ncolour = "blue"\n')
        cfg = load_config(tmp_path)
        assert cfg.tool.binary == "rc"

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text("[review]\ncontext_lines = 0\n")
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.review.context_lines == 0

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        bad_toml = tmp_path / ".lintstep.toml"
        bad_toml.write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / ".lintstep.toml").write_text('tool = "rubocop"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestValidation:
    def test_negative_context(self, tmp_path: Path):
        (tmp_path / ".lintstep.toml").write_text("[review]\ncontext_lines = -1\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_zero_timeout(self, tmp_path: Path):
        (tmp_path / ".lintstep.toml").write_text("[tool]\ntimeout = 0\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_directive_needs_placeholder(self, tmp_path: Path):
        (tmp_path / ".lintstep.toml").write_text('[directives]\ndisable_line = " # off"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_dataclass_defaults_are_valid(self):
        cfg = LintStepConfig()
        assert cfg.tool.timeout > 0
        assert "{rule_id}" in cfg.directives.disable_file_start


class TestEnvVarOverrides:
    def test_binary_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LINTSTEP_BINARY", "/opt/bin/rubocop")
        cfg = load_config(tmp_path)
        assert cfg.tool.binary == "/opt/bin/rubocop"

    def test_timeout_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LINTSTEP_TIMEOUT", "5")
        cfg = load_config(tmp_path)
        assert cfg.tool.timeout == 5

    def test_use_server_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LINTSTEP_USE_SERVER", "yes")
        cfg = load_config(tmp_path)
        assert cfg.tool.use_server is True

    def test_unsafe_rules_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LINTSTEP_UNSAFE_RULES", "Style/A, Lint/B")
        cfg = load_config(tmp_path)
        assert "Style/A" in cfg.review.unsafe_rules
        assert "Lint/B" in cfg.review.unsafe_rules

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LINTSTEP_TIMEOUT", "soon")
        cfg = load_config(tmp_path)
        assert cfg.tool.timeout == 60  # default unchanged

    def test_env_beats_file(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".lintstep.toml").write_text('[tool]\nbinary = "from-file"\n')
        monkeypatch.setenv("LINTSTEP_BINARY", "from-env")
        assert load_config(tmp_path).tool.binary == "from-env"
