from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from fileinfo.utils import cmd as cmd_utils


def test_run_cmd_executes_command() -> None:
    result = cmd_utils.run_cmd([Path(sys.executable), "-c", "print('hello world')"])

    assert result.returncode == 0
    assert result.stdout.strip() == "hello world"
    assert result.stderr == ""


def test_run_cmd_returns_non_zero_exit() -> None:
    result = cmd_utils.run_cmd([sys.executable, "-c", "import sys; sys.exit(3)"])

    assert result.returncode == 3


def test_run_cmd_passes_input_and_env() -> None:
    script = "import os, sys; print(os.environ['TZ'], sys.stdin.read().strip())"
    result = cmd_utils.run_cmd(
        [sys.executable, "-c", script], env={"TZ": "UTC"}, input="payload"
    )

    assert result.stdout.strip() == "UTC payload"


@pytest.mark.parametrize("invalid", ["echo hello", []])
def test_run_cmd_validates_command_input(invalid) -> None:
    with pytest.raises((TypeError, ValueError)):
        cmd_utils.run_cmd(invalid)  # type: ignore[arg-type]


def test_run_cmd_validates_timeout() -> None:
    with pytest.raises(ValueError):
        cmd_utils.run_cmd([sys.executable, "-c", "pass"], timeout=0)


def test_run_cmd_handles_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(*args, **kwargs):
        raise subprocess.TimeoutExpired(cmd=["demo"], timeout=5)

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(cmd_utils.CommandError) as exc:
        cmd_utils.run_cmd(["demo"], timeout=10)

    assert "timed out" in str(exc.value)


def test_run_cmd_handles_missing_binary() -> None:
    with pytest.raises(cmd_utils.CommandError) as exc:
        cmd_utils.run_cmd(["/nonexistent/fileinfo-tool"])

    assert "could not start" in str(exc.value)


def test_run_cmd_rejects_unsupported_argument_type() -> None:
    with pytest.raises(TypeError):
        cmd_utils.run_cmd([object()])  # type: ignore[list-item]


def test_quote_renders_paths() -> None:
    assert cmd_utils.quote(["ls", Path("/tmp/a b")]) == "ls '/tmp/a b'"
