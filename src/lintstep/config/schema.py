"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class ToolConfig:
    binary: str = "rubocop"
    timeout: int = 60  # seconds per analyzer call
    use_server: bool = False
    temp_dir: str = ".lintstep-tmp"  # project-local, so the analyzer finds its config


@dataclass
class ReviewConfig:
    context_lines: int = 2
    unsafe_rules: List[str] = field(default_factory=list)  # fixes that need apply_unsafe


@dataclass
class DisplayConfig:
    show_patch: bool = True
    inline_highlight: bool = True
    confirm_patch: bool = False
    summary_on_exit: bool = True


@dataclass
class DirectivesConfig:
    disable_line: str = " # rubocop:disable {rule_id}"
    disable_file_start: str = "# rubocop:disable {rule_id}"
    disable_file_end: str = "# rubocop:enable {rule_id}"


@dataclass
class LintStepConfig:
    version: str = "1.0"
    tool: ToolConfig = field(default_factory=ToolConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    directives: DirectivesConfig = field(default_factory=DirectivesConfig)
