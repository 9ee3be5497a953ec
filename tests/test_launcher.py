"""ManagedProcess: inherited stdio, LaunchError on bad command, SIGTERM then SIGKILL on stop."""

import signal
import sys
import time

import pytest

from mcp_wrapper.errors import LaunchError
from mcp_wrapper.launcher.process import ManagedProcess
from conftest import python_child

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX signal exit codes")


def _wait_for(predicate, timeout: float = 10.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


def test_child_inherits_stdout(capfd):
    proc = ManagedProcess(python_child("print('hello-from-mcp-child', flush=True)"))
    handle = proc.start()
    assert handle.wait(timeout=10) == 0
    out, _ = capfd.readouterr()
    assert "hello-from-mcp-child" in out
    assert proc.stop() == 0


def test_env_merged_over_parent(tmp_path):
    out_file = tmp_path / "env.txt"
    code = f"import os; open({str(out_file)!r}, 'w').write(os.environ['MCP_EXTRA'] + ':' + str('PATH' in os.environ))"
    proc = ManagedProcess(python_child(code, env={"MCP_EXTRA": "on"}))
    proc.start().wait(timeout=10)
    assert out_file.read_text() == "on:True"


def test_missing_command_raises_launch_error():
    from mcp_wrapper.config.settings import LauncherSettings

    proc = ManagedProcess(LauncherSettings(command="definitely-not-an-mcp-server-xyz", args=("mcp", "serve")))
    with pytest.raises(LaunchError, match="definitely-not-an-mcp-server-xyz mcp serve"):
        proc.start()
    assert proc.pid is None
    assert proc.stop() is None


def test_start_is_idempotent():
    proc = ManagedProcess(python_child("import time; time.sleep(30)"))
    try:
        first = proc.start()
        assert proc.start() is first
        assert proc.is_running
    finally:
        proc.stop()


def test_immediate_exit_not_detected_at_start():
    proc = ManagedProcess(python_child("raise SystemExit(3)"))
    proc.start()
    assert _wait_for(lambda: not proc.is_running)
    assert proc.returncode == 3
    assert proc.stop() == 3


@posix_only
def test_stop_sends_sigterm():
    proc = ManagedProcess(python_child("import time; time.sleep(30)"))
    proc.start()
    assert proc.is_running
    assert proc.stop() == -signal.SIGTERM
    assert not proc.is_running
    assert proc.stop() is None


@posix_only
def test_stop_kills_child_ignoring_sigterm(tmp_path):
    ready = tmp_path / "ready"
    code = (
        "import signal, time\n"
        "signal.signal(signal.SIGTERM, signal.SIG_IGN)\n"
        f"open({str(ready)!r}, 'w').close()\n"
        "time.sleep(30)\n"
    )
    proc = ManagedProcess(python_child(code, terminate_timeout_sec=0.5))
    proc.start()
    assert _wait_for(ready.exists)
    started = time.time()
    assert proc.stop() == -signal.SIGKILL
    assert time.time() - started < 10


def test_context_manager_stops_child():
    with ManagedProcess(python_child("import time; time.sleep(30)")) as proc:
        assert proc.is_running
    assert not proc.is_running
