"""Starter .lintstep.toml template."""

DEFAULT_TOML = """\
# lintstep configuration
version = "1.0"

[tool]
binary = "rubocop"          # analyzer executable
timeout = 60                # seconds per analyzer call
use_server = false          # start the analyzer's background server for faster fixes
temp_dir = ".lintstep-tmp"  # scratch copies live here so the analyzer finds project config

[review]
context_lines = 2           # unchanged lines shown around a patch
# unsafe_rules = ["Style/FrozenStringLiteralComment"]   # fixes that need [A]pply unsafe

[display]
show_patch = true
inline_highlight = true     # highlight changed characters in paired -/+ lines
confirm_patch = false       # ask before writing a correction
summary_on_exit = true

[directives]
# disable_line = " # rubocop:disable {rule_id}"
# disable_file_start = "# rubocop:disable {rule_id}"
# disable_file_end = "# rubocop:enable {rule_id}"
"""
