"""RuboCop subprocess wrapper — initial scan, single-file rescan, scratch-copy autocorrect."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from lintstep.config.schema import ToolConfig
from lintstep.corrector.base import CollaboratorFailure
from lintstep.corrector.server import RubocopServer
from lintstep.files import read_source, write_source

logger = logging.getLogger(__name__)

# RuboCop exits 0 (clean) or 1 (offenses found); anything else is an error.
_OK_CODES = (0, 1)


class RubocopApplier:
    """CorrectionApplier backed by the ``rubocop`` executable.

    Corrections run on a scratch copy inside the project (``temp_dir``) so
    RuboCop resolves the project's ``.rubocop.yml`` exactly as it would for
    the real file. The real file is never written here.
    """

    def __init__(self, config: ToolConfig, project_root: Path) -> None:
        self._config = config
        self._root = project_root
        self._temp_dir = project_root / config.temp_dir
        self._server: Optional[RubocopServer] = None
        if config.use_server:
            self._server = RubocopServer(config.binary, cwd=project_root)

    # ---- process plumbing ----

    def _command(self, args: Sequence[str]) -> List[str]:
        cmd = [self._config.binary, *args]
        if self._server is not None:
            cmd.insert(1, "--server")
        return cmd

    def _run(self, args: Sequence[str]) -> str:
        """Run the analyzer and return stdout. Raises CollaboratorFailure on failure."""
        if self._server is not None:
            self._server.ensure_running()
        cmd = self._command(args)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=self._root,
                capture_output=True,
                text=True,
                timeout=self._config.timeout,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise CollaboratorFailure(
                f"{self._config.binary} is not installed or not on PATH"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise CollaboratorFailure(
                f"{self._config.binary} timed out after {self._config.timeout}s"
            ) from exc

        if result.returncode not in _OK_CODES:
            stderr = result.stderr.strip() or result.stdout.strip()
            raise CollaboratorFailure(
                f"{self._config.binary} exited with {result.returncode}: {stderr}"
            )
        return result.stdout

    def _decode(self, output: str) -> Dict[str, Any]:
        try:
            data = json.loads(output)
        except ValueError as exc:
            raise CollaboratorFailure(f"Malformed JSON from {self._config.binary}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("files"), list):
            raise CollaboratorFailure(f"Unexpected output shape from {self._config.binary}")
        return data

    # ---- scratch copies ----

    def _scratch_path(self, file_path: str) -> Path:
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        suffix = Path(file_path).suffix or ".rb"
        return self._temp_dir / f"{uuid.uuid4().hex[:16]}{suffix}"

    def cleanup(self) -> None:
        """Remove the scratch directory and stop a server this process started."""
        if self._temp_dir.is_dir():
            shutil.rmtree(self._temp_dir, ignore_errors=True)
        if self._server is not None:
            self._server.stop()

    # ---- public API ----

    def scan(self, paths: Sequence[str]) -> str:
        """Run a full scan over *paths* and return the raw JSON collection."""
        output = self._run(["--format", "json", "--cache", "false", *paths])
        self._decode(output)
        return output

    def apply(self, file_path: str, rule_id: str, target_line: int) -> Optional[str]:
        """Correct a scratch copy of *file_path* for *rule_id* and return its content.

        RuboCop fixes every instance of the rule in the file; narrowing the
        result down to *target_line* is the caller's job.
        """
        try:
            original = read_source(file_path)
        except OSError as exc:
            raise CollaboratorFailure(f"Cannot read {file_path}: {exc}") from exc

        scratch = self._scratch_path(file_path)
        write_source(scratch, original)
        try:
            self._run(["--autocorrect-all", "--only", rule_id, "--format", "quiet", str(scratch)])
            corrected = read_source(scratch)
        finally:
            scratch.unlink(missing_ok=True)

        logger.debug("Corrected %s for %s (target line %d)", file_path, rule_id, target_line)
        if corrected == original:
            return None
        return corrected

    def rescan(self, file_path: str) -> List[Dict[str, Any]]:
        """Return the current offenses for *file_path* only."""
        data = self._decode(self._run(["--format", "json", "--cache", "false", file_path]))
        wanted = Path(self._root, file_path).resolve()
        for entry in data["files"]:
            path = entry.get("path") if isinstance(entry, dict) else None
            if path is None:
                continue
            if Path(self._root, path).resolve() == wanted:
                return list(entry.get("offenses") or [])
        return []
