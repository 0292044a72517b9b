"""Guarded wrappers for mount, stat and hardlink discovery tools."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from fileinfo.core.logger import get_module_logger
from fileinfo.utils.cmd import run_cmd

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import InspectionContext

logger = get_module_logger("tools.filesystem")

STAT_FORMAT = "\n".join(
    [
        "path:%n",
        "inode:%i",
        "type:%F",
        "size:%s bytes",
        "blocks:%b",
        "links:%h",
        "perms:%A (%a)",
        "uid:%u (%U)",
        "gid:%g (%G)",
        "atime:%x (%X)",
        "mtime:%y (%Y)",
        "ctime:%z (%Z)",
        "btime:%w (%W)",
    ]
)

ATIME_POLICIES = ("noatime", "strictatime", "relatime", "lazytime")

_PAIR_RE = re.compile(r'(\w+)="((?:[^"\\]|\\.)*)"')
_SUBVOLUME_RE = re.compile(r"\[[^\]]*\]$")


@dataclass(frozen=True)
class MountInfo:
    """Where the target lives: device, filesystem type, options and mount point."""

    source: str = ""
    fstype: str = ""
    options: str = ""
    target: str = ""

    @property
    def device(self) -> str:
        """Block device path without a bind-mount/subvolume suffix."""

        return _SUBVOLUME_RE.sub("", self.source)

    @property
    def known(self) -> bool:
        return bool(self.fstype)


def _parse_pairs(output: str) -> dict:
    line = next((item for item in output.splitlines() if item.strip()), "")
    return {key.lower(): value for key, value in _PAIR_RE.findall(line)}


def mount_info(ctx: "InspectionContext") -> MountInfo:
    """Classify the filesystem holding ``ctx.target``.

    ``findmnt`` is preferred; ``df`` supplies source, type and mount point
    when it is absent. Options are only known through ``findmnt``.
    """

    if ctx.probe.available("findmnt"):
        result = run_cmd(
            [
                "findmnt",
                "-n",
                "-P",
                "-o",
                "SOURCE,FSTYPE,OPTIONS,TARGET",
                "--target",
                ctx.target,
            ],
            timeout=ctx.timeout,
        )
        pairs = _parse_pairs(result.stdout)
        if pairs:
            return MountInfo(
                source=pairs.get("source", ""),
                fstype=pairs.get("fstype", ""),
                options=pairs.get("options", ""),
                target=pairs.get("target", ""),
            )
        logger.warning("findmnt returned no mount for %s", ctx.target)

    if ctx.probe.available("df"):
        result = run_cmd(
            ["df", "--output=source,fstype,target", ctx.target], timeout=ctx.timeout
        )
        rows = [line.split() for line in result.stdout.splitlines()[1:] if line.strip()]
        if rows and len(rows[-1]) >= 3:
            source, fstype, *target = rows[-1]
            return MountInfo(source=source, fstype=fstype, target=" ".join(target))

    return MountInfo()


def describe_mount(info: MountInfo) -> Optional[str]:
    """Render ``SOURCE FSTYPE OPTIONS`` the way ``findmnt -no`` prints it."""

    if not info.known:
        return None
    return " ".join(part for part in (info.source, info.fstype, info.options) if part)


def df_type(ctx: "InspectionContext") -> List[str]:
    """Return ``df -T`` output lines for the target."""

    result = run_cmd(["df", "-T", ctx.target], timeout=ctx.timeout)
    return result.stdout.splitlines() or [line for line in result.stderr.splitlines() if line]


def stat_lines(ctx: "InspectionContext") -> List[str]:
    """Return ``stat`` output rendered in the configured timezone."""

    result = run_cmd(
        ["stat", "-c", STAT_FORMAT, ctx.target],
        timeout=ctx.timeout,
        env={"TZ": ctx.config.timezone},
    )
    if result.returncode != 0:
        logger.warning("stat exited with %s: %s", result.returncode, result.stderr.strip())
    return result.stdout.splitlines()


def atime_policy(options: str) -> str:
    """Return the effective atime policy for a comma separated option string."""

    present = {item.strip() for item in options.split(",") if item.strip()}
    for policy in ATIME_POLICIES:
        if policy in present:
            if policy == "lazytime":
                return "lazytime (relatime)"
            return policy
    return "relatime (kernel default)"


def hardlinks(ctx: "InspectionContext") -> List[str]:
    """Return every path on the same filesystem sharing the target inode."""

    if ctx.inode.st_nlink <= 1:
        return [str(ctx.target)]

    mount_point = ctx.mount.target
    if not mount_point:
        logger.warning("Mount point unknown; cannot search for hardlinks")
        return []

    result = run_cmd(
        ["find", mount_point, "-xdev", "-samefile", ctx.target],
        timeout=ctx.timeout,
    )
    return sorted(line for line in result.stdout.splitlines() if line.strip())


__all__ = [
    "ATIME_POLICIES",
    "MountInfo",
    "STAT_FORMAT",
    "atime_policy",
    "describe_mount",
    "df_type",
    "hardlinks",
    "mount_info",
    "stat_lines",
]
