"""Run the status app under uvicorn on a dedicated thread so the main thread keeps signal handling."""

import logging
import threading
import time
from typing import Optional

import uvicorn

from mcp_wrapper.config.settings import ServerSettings
from mcp_wrapper.core.logging_utils import log_lifecycle
from mcp_wrapper.errors import ServerStartError, ShutdownError
from mcp_wrapper.status_server.app import create_app

logger = logging.getLogger(__name__)

# Poll interval while waiting for uvicorn to report started
_STARTUP_POLL_SEC = 0.05


class StatusServer:
    """Owns the uvicorn server and its thread. uvicorn skips its own signal handlers off the main thread."""

    def __init__(self, settings: ServerSettings):
        self.settings = settings
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def started(self) -> bool:
        return self._server is not None and self._server.started

    def start(self) -> None:
        """Bind and start serving. Blocks until uvicorn reports started; ServerStartError if the thread dies first."""
        if self._thread is not None:
            return
        app = create_app(self.settings)
        config = uvicorn.Config(
            app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level,
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(target=self._server.run, name="status-server", daemon=True)
        self._thread.start()
        while not self._server.started:
            if not self._thread.is_alive():
                raise ServerStartError(
                    f"status server failed to bind {self.settings.host}:{self.settings.port}"
                )
            time.sleep(_STARTUP_POLL_SEC)
        log_lifecycle("listener_started", host=self.settings.host, port=self.settings.port)

    def stop(self) -> None:
        """Stop accepting connections and wait for the serving thread to finish."""
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout=self.settings.shutdown_timeout_sec)
        if self._thread.is_alive():
            raise ShutdownError(
                [f"status server thread still running after {self.settings.shutdown_timeout_sec}s"]
            )
        log_lifecycle("listener_stopped", port=self.settings.port)

    def __enter__(self) -> "StatusServer":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
