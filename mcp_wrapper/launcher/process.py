"""External MCP server process: start with inherited stdio, stop with SIGTERM then SIGKILL.

No output parsing, no restart, no health check. Whether the child is alive never
feeds into the HTTP status payload.
"""

import logging
import os
import subprocess
from typing import Optional

from mcp_wrapper.config.settings import LauncherSettings
from mcp_wrapper.core.logging_utils import log_lifecycle
from mcp_wrapper.errors import LaunchError

logger = logging.getLogger(__name__)

# Wait after SIGKILL before giving up on reaping the child
_KILL_WAIT_SEC = 5.0


class ManagedProcess:
    """Owns one child process handle from start() to stop()."""

    def __init__(self, settings: LauncherSettings):
        self.settings = settings
        self._proc: Optional[subprocess.Popen] = None
        self._stopped = False

    @property
    def argv(self) -> list:
        return self.settings.argv

    @property
    def pid(self) -> Optional[int]:
        return self._proc.pid if self._proc is not None else None

    @property
    def returncode(self) -> Optional[int]:
        return self._proc.poll() if self._proc is not None else None

    @property
    def is_running(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    def start(self) -> subprocess.Popen:
        """Start the child. stdin/stdout/stderr are not redirected, so the child writes straight to our console."""
        if self._proc is not None:
            return self._proc
        env = None
        if self.settings.env:
            env = os.environ.copy()
            env.update(self.settings.env)
        try:
            self._proc = subprocess.Popen(self.argv, env=env)
        except OSError as e:
            raise LaunchError(f"failed to start {' '.join(self.argv)!r}: {e}") from e
        log_lifecycle("child_started", pid=self._proc.pid, argv=" ".join(self.argv))
        return self._proc

    def stop(self) -> Optional[int]:
        """Terminate and reap the child. Returns its exit code; None if never started or already stopped.

        SIGTERM first; SIGKILL if it has not exited after terminate_timeout_sec.
        Raises subprocess.TimeoutExpired if it survives SIGKILL as well.
        """
        if self._proc is None or self._stopped:
            return None
        self._stopped = True
        p = self._proc
        if p.poll() is not None:
            log_lifecycle("child_reaped", pid=p.pid, code=p.returncode)
            return p.returncode
        timeout = self.settings.terminate_timeout_sec
        p.terminate()
        try:
            code = p.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Child pid=%s did not exit in %ss after SIGTERM, sending SIGKILL", p.pid, timeout)
            p.kill()
            code = p.wait(timeout=_KILL_WAIT_SEC)
        log_lifecycle("child_stopped", pid=p.pid, code=code)
        return code

    def __enter__(self) -> "ManagedProcess":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
