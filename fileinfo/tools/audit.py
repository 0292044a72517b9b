"""Guarded wrapper for the Linux audit subsystem (``ausearch``)."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from fileinfo.core.logger import get_module_logger
from fileinfo.utils.cmd import run_cmd

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import InspectionContext

logger = get_module_logger("tools.audit")


def audit_events(ctx: "InspectionContext") -> List[str]:
    """Return audit records touching the target since ``audit_since``.

    ``ausearch`` exits 1 when nothing matches and needs read access to the
    audit log, so both cases collapse into the same informational line.
    """

    window = ctx.config.audit_since
    if not ctx.probe.available("ausearch"):
        return ["ausearch not installed / auditd likely not enabled"]

    command = ctx.privilege.wrap(["ausearch", "-f", str(ctx.target), "-ts", window])
    result = run_cmd(command, timeout=ctx.timeout)
    lines = [line for line in result.stdout.splitlines() if line.strip()]
    if result.returncode != 0 or not lines:
        if result.stderr.strip():
            logger.info("ausearch: %s", result.stderr.strip())
        return [f"no audit events for {window}"]
    return lines


__all__ = ["audit_events"]
