"""Wrapper lifecycle: start MCP server child -> start status listener -> idle -> stop child, stop listener.

SIGTERM/SIGINT call McpWrapper.stop(); run() then shuts both down, waiting for each and
surfacing failures as ShutdownError instead of dropping them.
"""

import logging
import signal
import subprocess
import threading
from typing import Any, Callable, Dict, List, Optional

from mcp_wrapper.config.settings import WrapperSettings
from mcp_wrapper.core.logging_utils import log_lifecycle
from mcp_wrapper.errors import LaunchError, ServerStartError, ShutdownError
from mcp_wrapper.launcher.process import ManagedProcess
from mcp_wrapper.status_server.server import StatusServer

logger = logging.getLogger(__name__)

# Idle loop tick: how often we check the listener thread and child while waiting for stop
_IDLE_POLL_SEC = 0.5

STOP_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class McpWrapper:
    """Owns the child process and the status listener for one run."""

    def __init__(
        self,
        settings: WrapperSettings,
        process: Optional[ManagedProcess] = None,
        server: Optional[StatusServer] = None,
    ):
        self.settings = settings
        self.process = process or ManagedProcess(settings.launcher)
        self.server = server or StatusServer(settings.server)
        self._stop_event = threading.Event()
        self._child_exit_logged = False

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Request shutdown. Safe from a signal handler or another thread."""
        self._stop_event.set()

    def run(self) -> None:
        """Start child then listener, idle until stop() or the listener dies, then shut both down."""
        try:
            self.process.start()
            self.server.start()
            logger.info(
                "Claude Code MCP Server HTTP wrapper running on port %s", self.settings.server.port
            )
            self._idle()
        finally:
            self._shutdown()

    def _idle(self) -> None:
        while not self._stop_event.wait(_IDLE_POLL_SEC):
            if not self.server.is_running:
                logger.warning("Status listener exited unexpectedly; shutting down")
                return
            self._note_child_exit()
        logger.info("Stop requested; shutting down")

    def _note_child_exit(self) -> None:
        # Child is not restarted and the status payload does not change
        if self._child_exit_logged or self.process.pid is None:
            return
        code = self.process.returncode
        if code is not None:
            self._child_exit_logged = True
            log_lifecycle("child_exited", level=logging.WARNING, pid=self.process.pid, code=code)

    def _shutdown(self) -> None:
        """Stop child first, then listener. Both are always attempted; failures raise one ShutdownError."""
        failures: List[str] = []
        try:
            self.process.stop()
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Stopping MCP server child failed: %s", e)
            failures.append(f"child: {e}")
        try:
            self.server.stop()
        except ShutdownError as e:
            logger.error("Stopping status listener failed: %s", e)
            failures.extend(e.failures)
        if failures:
            raise ShutdownError(failures)
        log_lifecycle("stopped")


def install_signal_handlers(wrapper: McpWrapper) -> Dict[int, Any]:
    """SIGTERM/SIGINT -> wrapper.stop(). Returns previous handlers for restore_signal_handlers()."""

    def _on_stop_signal(signum: int, _frame: Any) -> None:
        logger.info("Received %s -> requesting stop", signal.Signals(signum).name)
        wrapper.stop()

    previous: Dict[int, Any] = {}
    for sig in STOP_SIGNALS:
        previous[sig] = signal.getsignal(sig)
        signal.signal(sig, _on_stop_signal)
    return previous


def restore_signal_handlers(previous: Dict[int, Any]) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)


def run_wrapper(
    settings: WrapperSettings,
    wrapper_factory: Callable[[WrapperSettings], McpWrapper] = McpWrapper,
) -> int:
    """Entry: run the wrapper until SIGTERM/SIGINT. Returns process exit code (0 clean, 1 on failure)."""
    wrapper = wrapper_factory(settings)
    previous = install_signal_handlers(wrapper)
    try:
        wrapper.run()
    except LaunchError as e:
        logger.error("Could not start MCP server: %s", e)
        return 1
    except ServerStartError as e:
        logger.error("Could not start status listener: %s", e)
        return 1
    except ShutdownError as e:
        logger.error("Shutdown incomplete: %s", e)
        return 1
    finally:
        restore_signal_handlers(previous)
    return 0
