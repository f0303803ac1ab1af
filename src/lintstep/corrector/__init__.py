"""Correction appliers — the analyzer interface and its RuboCop implementation."""

from lintstep.corrector.base import CollaboratorFailure, CorrectionApplier
from lintstep.corrector.rubocop import RubocopApplier
from lintstep.corrector.server import RubocopServer

__all__ = [
    "CollaboratorFailure",
    "CorrectionApplier",
    "RubocopApplier",
    "RubocopServer",
]
