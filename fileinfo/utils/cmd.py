"""Utilities for executing external inspection tools with guards."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

Command = Sequence[str | Path]


class CommandError(RuntimeError):
    """Raised when an external command cannot be executed."""


def which(tool: str) -> Optional[str]:
    """Return the full path of ``tool`` if available."""

    return shutil.which(tool)


def quote(cmd: Iterable[str | Path]) -> str:
    """Return a shell-style rendering of ``cmd`` for logs and audit entries."""

    return " ".join(shlex.quote(str(part)) for part in cmd)


def _normalise_command(cmd: Iterable[str | Path]) -> list[str]:
    if isinstance(cmd, str | bytes):
        raise TypeError(
            "Command must be an iterable of path/str components, not a string"
        )

    normalised: list[str] = []
    for part in cmd:
        if isinstance(part, Path):
            normalised.append(str(part))
        elif isinstance(part, str):
            normalised.append(part)
        else:
            raise TypeError(f"Unsupported command argument type: {type(part)!r}")

    if not normalised:
        raise ValueError("Command must contain at least one argument")

    return normalised


def run_cmd(
    cmd: Command,
    *,
    timeout: int = 300,
    env: Optional[Mapping[str, str]] = None,
    input: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """Execute ``cmd`` and return the completed process.

    Non-zero exit codes are returned to the caller rather than raised: most
    inspection tools signal "nothing found" that way. ``env`` entries are
    layered over the current environment. Output is decoded as UTF-8 with
    replacement so binary noise from a tool never aborts a report.
    """

    if timeout <= 0:
        raise ValueError("timeout must be greater than zero")

    command = _normalise_command(cmd)
    merged_env = None
    if env is not None:
        merged_env = dict(os.environ)
        merged_env.update(env)

    try:
        return subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            input=input,
            timeout=timeout,
            env=merged_env,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandError(
            f"Command timed out after {timeout}s: {quote(command)}"
        ) from exc
    except OSError as exc:
        raise CommandError(f"Command could not start: {quote(command)} ({exc})") from exc


__all__ = ["Command", "CommandError", "quote", "run_cmd", "which"]
