"""Correction applier interface shared by the real analyzer and test doubles."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


class CollaboratorFailure(Exception):
    """Raised when the analyzer cannot correct or rescan a file.

    The session treats this as "no change produced".
    """


@runtime_checkable
class CorrectionApplier(Protocol):
    """External engine that corrects and rescans single files.

    Neither method writes the reviewed file: ``apply`` returns the corrected
    content and the caller decides what to write.
    """

    def apply(self, file_path: str, rule_id: str, target_line: int) -> Optional[str]:
        """Return the full corrected content of *file_path* for *rule_id*, or None."""
        ...

    def rescan(self, file_path: str) -> List[Dict[str, Any]]:
        """Return the offense dicts currently reported for *file_path* only."""
        ...
