"""Tests for the swanctl subprocess boundary."""

import subprocess
from unittest.mock import patch

import pytest

from swanui.agent.swanctl import SwanctlRunner
from swanui.errors import ExternalProcessFailure, ExternalProcessTimeout


def _completed(returncode: int, stdout: str) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["swanctl"], returncode=returncode, stdout=stdout)


def test_run_returns_combined_output():
    runner = SwanctlRunner(binary="/usr/sbin/swanctl", timeout=3)
    with patch("swanui.agent.swanctl.subprocess.run", return_value=_completed(0, "out\n")) as run:
        assert runner.list_sas() == "out\n"
    args, kwargs = run.call_args
    assert args[0] == ["/usr/sbin/swanctl", "--list-sas"]
    assert kwargs["stderr"] == subprocess.STDOUT
    assert kwargs["timeout"] == 3


def test_non_zero_exit_raises_with_output():
    runner = SwanctlRunner()
    with patch("swanui.agent.swanctl.subprocess.run", return_value=_completed(1, "connecting failed\n")):
        with pytest.raises(ExternalProcessFailure) as exc:
            runner.list_conns()
    assert exc.value.returncode == 1
    assert exc.value.output == "connecting failed\n"
    assert exc.value.command == ["swanctl", "--list-conns"]
    assert not isinstance(exc.value, ExternalProcessTimeout)


def test_missing_binary_raises_failure():
    runner = SwanctlRunner(binary="does-not-exist")
    with patch("swanui.agent.swanctl.subprocess.run", side_effect=FileNotFoundError("No such file")):
        with pytest.raises(ExternalProcessFailure) as exc:
            runner.run("--list-sas")
    assert "No such file" in str(exc.value)


def test_timeout_is_a_distinct_failure():
    runner = SwanctlRunner(timeout=2)
    err = subprocess.TimeoutExpired(cmd=["swanctl", "--list-sas"], timeout=2, output=b"partial")
    with patch("swanui.agent.swanctl.subprocess.run", side_effect=err):
        with pytest.raises(ExternalProcessTimeout) as exc:
            runner.list_sas()
    assert exc.value.timeout == 2
    assert exc.value.output == "partial"
    assert "timed out after 2s" in str(exc.value)


def test_lenient_read_returns_empty_text():
    runner = SwanctlRunner()
    with patch("swanui.agent.swanctl.subprocess.run", return_value=_completed(2, "boom")):
        assert runner.list_conns(strict=False) == ""
    with patch("swanui.agent.swanctl.subprocess.run", side_effect=subprocess.TimeoutExpired("swanctl", 1)):
        assert runner.list_sas(strict=False) == ""
