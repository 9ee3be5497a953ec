"""Exceptions raised by the wrapper. run_wrapper() maps them to exit codes."""


class WrapperError(Exception):
    """Base class for wrapper errors."""


class ConfigError(WrapperError):
    """Config file or environment override is invalid."""


class LaunchError(WrapperError):
    """External MCP server process could not be started."""


class ServerStartError(WrapperError):
    """Status HTTP listener did not come up (e.g. port already bound)."""


class ShutdownError(WrapperError):
    """One or more shutdown steps failed; message lists each failure."""

    def __init__(self, failures):
        self.failures = list(failures)
        super().__init__("; ".join(self.failures))
