"""Diagnostic models and the ordered catalog."""

from lintstep.diagnostics.catalog import CatalogError, DiagnosticCatalog, parse_offenses
from lintstep.diagnostics.models import Diagnostic, ItemState, SessionItem

__all__ = [
    "CatalogError",
    "Diagnostic",
    "DiagnosticCatalog",
    "ItemState",
    "SessionItem",
    "parse_offenses",
]
