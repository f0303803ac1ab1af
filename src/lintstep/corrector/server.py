"""Optional RuboCop server lifecycle — start, stop, health check."""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class RubocopServer:
    """Manage ``rubocop --start-server`` for faster repeated corrections.

    Only a server started by this instance is stopped by ``stop()``.
    """

    def __init__(
        self,
        binary: str = "rubocop",
        *,
        cwd: Optional[Path] = None,
        patience: int = 10,
        sleep_time: float = 0.1,
    ) -> None:
        self._binary = binary
        self._cwd = cwd
        self._patience = patience
        self._sleep_time = sleep_time
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def _call(self, flag: str) -> bool:
        try:
            result = subprocess.run(
                [self._binary, flag],
                cwd=self._cwd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=30,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False
        return result.returncode == 0

    def running(self) -> bool:
        return self._call("--server-status")

    def start(self) -> None:
        if self.running():
            return
        logger.info("Starting %s server", self._binary)
        try:
            launcher = subprocess.Popen(
                [self._binary, "--start-server"],
                cwd=self._cwd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except FileNotFoundError:
            logger.warning("%s is not installed; running without a server", self._binary)
            return

        for _ in range(self._patience):
            if self.running():
                break
            time.sleep(self._sleep_time)
        else:
            logger.warning("%s server did not report ready", self._binary)
        try:
            launcher.wait(timeout=self._patience * self._sleep_time + 1)
        except subprocess.TimeoutExpired:
            logger.debug("%s server launcher still running", self._binary)
        self._started = True

    def ensure_running(self) -> None:
        if self._started or self.running():
            return
        self.start()

    def stop(self) -> None:
        if not self._started:
            return
        logger.info("Stopping %s server", self._binary)
        self._call("--stop-server")
        self._started = False
