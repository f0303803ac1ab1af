"""Review session — actions, dispatcher, and the controller state machine."""

from lintstep.session.actions import Action, ActionDispatcher, ActionKind, Outcome, parse_action
from lintstep.session.controller import SessionController, SessionStats, SessionUI, Step
from lintstep.session.errors import LintStepError, PolicyViolation, UserInputError

__all__ = [
    "Action",
    "ActionDispatcher",
    "ActionKind",
    "LintStepError",
    "Outcome",
    "PolicyViolation",
    "SessionController",
    "SessionStats",
    "SessionUI",
    "Step",
    "UserInputError",
    "parse_action",
]
