"""JSON report of a finished session, for scripting."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from lintstep.diagnostics.models import SessionItem
from lintstep.session.controller import SessionStats


def to_dict(stats: SessionStats, items: Optional[List[SessionItem]] = None) -> Dict[str, Any]:
    """Convert final counts (and the items still listed) to a JSON-serialisable dict."""
    report: Dict[str, Any] = {"version": "1.0", **stats.to_dict()}
    if items is not None:
        report["remaining"] = [
            {
                "file": item.diagnostic.file_path,
                "line": item.diagnostic.line,
                "column": item.diagnostic.column,
                "rule": item.diagnostic.rule_id,
                "severity": item.diagnostic.severity,
                "state": item.state.value,
            }
            for item in items
        ]
    return report


def render(stats: SessionStats, items: Optional[List[SessionItem]] = None) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(stats, items), indent=2)
