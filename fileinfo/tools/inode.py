"""Low-level inode timestamps by filesystem type.

``ext4`` inodes are read through ``debugfs`` on the block device, ``xfs``
inodes through ``xfs_io`` on the file itself. Both are normalised into the
same four fields so the report reads the same whichever tool answered.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from fileinfo.core.logger import get_module_logger
from fileinfo.core.time_utils import epoch_to_utc
from fileinfo.utils.cmd import run_cmd

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import InspectionContext

logger = get_module_logger("tools.inode")

NORMALISED_FIELDS = ("creation", "modification", "access", "change")

_FIELD_NAMES = {
    "crtime": "creation",
    "btime": "creation",
    "mtime": "modification",
    "atime": "access",
    "ctime": "change",
}

_DEBUGFS_FILTER = re.compile(r"crtime|ctime|mtime|atime", re.IGNORECASE)
# " crtime: 0x65a1b2c3:1a2b3c4d -- Fri Jan 12 10:00:00 2024"
_DEBUGFS_TIME = re.compile(
    r"^\s*(?P<name>crtime|ctime|mtime|atime)\s*:\s*(?P<raw>\S+)\s*--\s*(?P<human>.+?)\s*$",
    re.IGNORECASE,
)

_XFS_FILTER = re.compile(r"btime|crtime|mtime|atime|ctime|ino|size", re.IGNORECASE)
# "stat.mtime = Fri Jan 12 10:00:00 2024" / "stat.btime.tv_sec = 1705053600"
_XFS_TIME = re.compile(
    r"^\s*stat\.(?P<name>btime|crtime|mtime|atime|ctime)"
    r"(?:\.(?P<part>tv_sec|tv_nsec))?\s*=\s*(?P<value>.+?)\s*$",
    re.IGNORECASE,
)


@dataclass
class InodeTimes:
    """Inode timestamps normalised across filesystem tools."""

    tool: str
    fields: Dict[str, str] = field(default_factory=dict)
    raw: List[str] = field(default_factory=list)

    def lines(self) -> List[str]:
        return [
            f"{name}: {self.fields[name]}"
            for name in NORMALISED_FIELDS
            if name in self.fields
        ]


def parse_debugfs(output: str) -> InodeTimes:
    """Parse ``debugfs -R "stat <ino>"`` output."""

    times = InodeTimes(tool="debugfs")
    for line in output.splitlines():
        if not _DEBUGFS_FILTER.search(line):
            continue
        times.raw.append(line.rstrip())
        match = _DEBUGFS_TIME.match(line)
        if not match:
            continue
        name = _FIELD_NAMES[match.group("name").lower()]
        times.fields.setdefault(name, f"{match.group('human')} ({match.group('raw')})")
    return times


def parse_xfs_io(output: str) -> InodeTimes:
    """Parse ``xfs_io`` ``stat -v`` and ``statx -r`` output."""

    times = InodeTimes(tool="xfs_io")
    textual: Dict[str, str] = {}
    seconds: Dict[str, int] = {}
    nanos: Dict[str, int] = {}

    for line in output.splitlines():
        if not _XFS_FILTER.search(line):
            continue
        times.raw.append(line.rstrip())
        match = _XFS_TIME.match(line)
        if not match:
            continue
        name = _FIELD_NAMES[match.group("name").lower()]
        part = match.group("part")
        value = match.group("value")
        try:
            if part == "tv_sec":
                seconds[name] = int(value)
            elif part == "tv_nsec":
                nanos[name] = int(value)
            else:
                textual.setdefault(name, value)
        except ValueError:
            logger.debug("Ignoring unparsable xfs_io value: %s", line.strip())

    for name in NORMALISED_FIELDS:
        if name in textual:
            times.fields[name] = textual[name]
        elif name in seconds:
            times.fields[name] = epoch_to_utc(seconds[name], nanos.get(name, 0))
    return times


def _debugfs_times(ctx: "InspectionContext") -> InodeTimes:
    device = ctx.mount.device
    command = ctx.privilege.wrap(
        ["debugfs", "-R", f"stat <{ctx.inode.st_ino}>", device]
    )
    result = run_cmd(command, timeout=ctx.timeout)
    if result.returncode != 0:
        logger.warning(
            "debugfs exited with %s: %s", result.returncode, result.stderr.strip()
        )
    return parse_debugfs(result.stdout)


def _xfs_io_times(ctx: "InspectionContext") -> InodeTimes:
    result = run_cmd(
        ["xfs_io", "-r", "-c", "stat -v", "-c", "statx -r -m all", ctx.target],
        timeout=ctx.timeout,
    )
    if result.returncode != 0:
        logger.warning(
            "xfs_io exited with %s: %s", result.returncode, result.stderr.strip()
        )
    return parse_xfs_io(result.stdout)


@dataclass(frozen=True)
class TimeStrategy:
    tool: str
    collect: Callable[["InspectionContext"], InodeTimes]
    privileged: bool = False


STRATEGIES: Dict[str, TimeStrategy] = {
    "ext4": TimeStrategy("debugfs", _debugfs_times, privileged=True),
    "xfs": TimeStrategy("xfs_io", _xfs_io_times),
}


def strategy_for(fstype: str) -> Optional[TimeStrategy]:
    return STRATEGIES.get(fstype.lower()) if fstype else None


def low_level_times(ctx: "InspectionContext") -> List[str]:
    """Return report lines for the filesystem-specific inode timestamps."""

    fstype = ctx.mount.fstype
    strategy = strategy_for(fstype)
    if strategy is None:
        label = fstype or "unknown filesystem"
        return [f"No specialized low-level time tool for {label}; rely on STAT above."]

    if not ctx.probe.available(strategy.tool):
        return [f"{strategy.tool} not installed; skip {fstype} low-level times."]

    times = strategy.collect(ctx)
    if not times.raw:
        message = f"({strategy.tool} returned no inode times"
        hint = ctx.privilege.hint() if strategy.privileged else ""
        return [f"{message}; {hint})" if hint else f"{message})"]

    lines = [f"source: {strategy.tool}"]
    lines.extend(times.raw)
    if times.fields:
        lines.append("-- normalised --")
        lines.extend(times.lines())
    return lines


__all__ = [
    "InodeTimes",
    "NORMALISED_FIELDS",
    "STRATEGIES",
    "low_level_times",
    "parse_debugfs",
    "parse_xfs_io",
    "strategy_for",
]
