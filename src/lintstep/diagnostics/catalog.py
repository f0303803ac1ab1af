"""Diagnostic catalog — ordered, flat list of offenses with per-file splicing.

Accepts the analyzer's JSON collection::

    {"files": [{"path": "...", "offenses": [{"cop_name": "...", ...}]}]}

Order is file insertion order, then the analyzer's order within each file.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from lintstep.diagnostics.models import Diagnostic

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the diagnostic input is malformed."""


def _offense_rule_id(data: Mapping[str, Any]) -> str:
    rule_id = data.get("cop_name") or data.get("rule_id")
    if not isinstance(rule_id, str) or not rule_id:
        raise CatalogError(f"Offense without a rule id: {data!r}")
    return rule_id


def _offense_safe(data: Mapping[str, Any]) -> bool:
    for key in ("safe_autocorrect", "safe_to_autofix"):
        if key in data:
            return bool(data[key])
    return True


def parse_offense(
    file_path: str,
    data: Mapping[str, Any],
    unsafe_rules: Iterable[str] = (),
) -> Diagnostic:
    """Build one Diagnostic from an offense dict."""
    if not isinstance(data, Mapping):
        raise CatalogError(f"Offense for {file_path} is not an object")
    rule_id = _offense_rule_id(data)
    location = data.get("location") or {}
    if not isinstance(location, Mapping):
        raise CatalogError(f"Offense {rule_id} in {file_path} has a bad location")
    try:
        line = int(location.get("start_line", location.get("line", 0)))
        column = int(location.get("start_column", location.get("column", 0)))
        length = int(location.get("length", 0))
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"Offense {rule_id} in {file_path}: {exc}") from exc

    return Diagnostic(
        file_path=file_path,
        rule_id=rule_id,
        message=str(data.get("message", "")),
        severity=str(data.get("severity", "convention")),
        correctable=bool(data.get("correctable", False)),
        safe_to_autofix=_offense_safe(data) and rule_id not in set(unsafe_rules),
        line=line,
        column=column,
        length=length,
    )


def parse_offenses(
    file_path: str,
    offenses: Iterable[Mapping[str, Any]],
    unsafe_rules: Iterable[str] = (),
) -> List[Diagnostic]:
    """Convert one file's offense list, keeping the analyzer's order."""
    unsafe = frozenset(unsafe_rules)
    return [parse_offense(file_path, o, unsafe) for o in offenses]


def _decode(raw: Union[str, bytes, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"Diagnostic input is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise CatalogError("Diagnostic input must be a JSON object")
    return data


class DiagnosticCatalog:
    """Ordered list of diagnostics across files."""

    def __init__(self, diagnostics: Optional[List[Diagnostic]] = None) -> None:
        self._diagnostics: List[Diagnostic] = list(diagnostics or [])

    # ---- construction ----

    @classmethod
    def parse(
        cls,
        raw: Union[str, bytes, Mapping[str, Any]],
        *,
        unsafe_rules: Iterable[str] = (),
    ) -> "DiagnosticCatalog":
        data = _decode(raw)
        files = data.get("files")
        if not isinstance(files, list):
            raise CatalogError("Diagnostic input has no 'files' list")

        unsafe = frozenset(unsafe_rules)
        diagnostics: List[Diagnostic] = []
        for entry in files:
            if not isinstance(entry, Mapping) or "path" not in entry:
                raise CatalogError(f"File entry without a path: {entry!r}")
            offenses = entry.get("offenses") or []
            if not isinstance(offenses, list):
                raise CatalogError(f"Offenses for {entry['path']} must be a list")
            diagnostics.extend(parse_offenses(str(entry["path"]), offenses, unsafe))

        logger.debug("Parsed %d diagnostics across %d files", len(diagnostics), len(files))
        return cls(diagnostics)

    # ---- queries ----

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def files(self) -> List[str]:
        """File paths in catalog order, each listed once."""
        return list(dict.fromkeys(d.file_path for d in self._diagnostics))

    def for_file(self, file_path: str) -> List[Diagnostic]:
        return [d for d in self._diagnostics if d.file_path == file_path]

    def rule_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for d in self._diagnostics:
            counts[d.rule_id] = counts.get(d.rule_id, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._diagnostics[index]

    # ---- reconciliation ----

    def splice(self, file_path: str, fresh: Iterable[Diagnostic]) -> None:
        """Replace every entry for *file_path* with *fresh*, in place.

        The fresh entries go where the first removed entry was, or at the
        end if the file had none. Other files keep their relative order.
        """
        fresh_list = list(fresh)
        insert_at: Optional[int] = None
        kept: List[Diagnostic] = []
        for d in self._diagnostics:
            if d.file_path == file_path:
                if insert_at is None:
                    insert_at = len(kept)
                continue
            kept.append(d)

        if insert_at is None:
            insert_at = len(kept)
        kept[insert_at:insert_at] = fresh_list
        self._diagnostics = kept
        logger.debug(
            "Spliced %d fresh diagnostics for %s at %d (catalog size %d)",
            len(fresh_list), file_path, insert_at, len(kept),
        )
