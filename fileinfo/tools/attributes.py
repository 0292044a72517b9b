"""Guarded wrappers for ACL, extended attribute and inode flag tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from fileinfo.utils.cmd import run_cmd

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import InspectionContext


def _lines(stdout: str) -> List[str]:
    return [line for line in stdout.splitlines() if line.strip()]


def acl_lines(ctx: "InspectionContext") -> List[str]:
    """``getfacl -p``: absolute names keep the output unambiguous."""

    if not ctx.probe.available("getfacl"):
        return [ctx.probe.missing("getfacl")]
    result = run_cmd(["getfacl", "-p", "--", ctx.target], timeout=ctx.timeout)
    return _lines(result.stdout) or ["(no ACL entries)"]


def xattr_lines(ctx: "InspectionContext") -> List[str]:
    """``getfattr`` dump of every namespace, values hex-encoded to keep raw bytes."""

    if not ctx.probe.available("getfattr"):
        return [ctx.probe.missing("getfattr")]
    result = run_cmd(
        ["getfattr", "-d", "-m", "-", "-e", "hex", "--", ctx.target],
        timeout=ctx.timeout,
    )
    if result.returncode != 0:
        return ["(no xattrs)"]
    return _lines(result.stdout) or ["(no xattrs)"]


def flag_lines(ctx: "InspectionContext") -> List[str]:
    if not ctx.probe.available("lsattr"):
        return [ctx.probe.missing("lsattr")]
    result = run_cmd(["lsattr", "-a", "--", ctx.target], timeout=ctx.timeout)
    lines = _lines(result.stdout)
    if not lines:
        detail = result.stderr.strip().splitlines()
        return [f"(lsattr: {detail[-1]})" if detail else "(no attribute flags)"]
    return lines


__all__ = ["acl_lines", "flag_lines", "xattr_lines"]
