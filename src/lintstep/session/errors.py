"""Recoverable session errors, surfaced inline by the UI."""

from __future__ import annotations


class LintStepError(Exception):
    """Base class for lintstep errors."""


class UserInputError(LintStepError):
    """Unknown action token, or navigation past a boundary. No state change."""


class PolicyViolation(LintStepError):
    """A correction the current policy forbids (unsafe, or not correctable)."""
