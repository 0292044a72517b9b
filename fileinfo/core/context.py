"""Target resolution, tool probing and the per-run inspection context."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Callable, Dict, Optional

from fileinfo.core.config import InspectorConfig
from fileinfo.core.logger import get_module_logger
from fileinfo.core.privilege import PrivilegePolicy
from fileinfo.utils import cmd as cmd_utils

logger = get_module_logger("context")


class TargetNotFound(FileNotFoundError):
    """Raised when the requested path does not exist."""

    def __init__(self, raw: str):
        super().__init__(f"File not found: {raw}")
        self.raw = raw


def resolve_target(raw: str | Path) -> Path:
    """Return the absolute, symlink-resolved path for ``raw``.

    A dangling symlink counts as missing, matching ``test -e``.
    """

    candidate = Path(raw)
    if not os.path.exists(candidate):
        raise TargetNotFound(str(raw))
    try:
        return candidate.resolve(strict=True)
    except (FileNotFoundError, RuntimeError) as exc:
        raise TargetNotFound(str(raw)) from exc


class ToolProbe:
    """Cached ``PATH`` lookups for optional external tools."""

    def __init__(self, which: Optional[Callable[[str], Optional[str]]] = None):
        self._which = which or cmd_utils.which
        self._cache: Dict[str, Optional[str]] = {}

    def path(self, tool: str) -> Optional[str]:
        if tool not in self._cache:
            self._cache[tool] = self._which(tool)
            if self._cache[tool] is None:
                logger.info("Tool not found on PATH: %s", tool)
        return self._cache[tool]

    def available(self, tool: str) -> bool:
        return self.path(tool) is not None

    @staticmethod
    def missing(tool: str) -> str:
        return f"{tool} not installed."

    def snapshot(self) -> Dict[str, bool]:
        """Availability of every tool probed so far."""

        return {name: location is not None for name, location in sorted(self._cache.items())}


@dataclass
class InspectionContext:
    """Everything a report section needs to inspect one target."""

    target: Path
    config: InspectorConfig
    probe: ToolProbe = field(default_factory=ToolProbe)
    privilege: Optional[PrivilegePolicy] = None

    def __post_init__(self):
        if self.privilege is None:
            self.privilege = PrivilegePolicy(
                enabled=self.config.escalate_privileges,
                launcher=self.config.escalation_command,
                probe=self.probe,
            )

    @property
    def timeout(self) -> int:
        return self.config.command_timeout

    @cached_property
    def mount(self):
        """Mount information for the target, probed once per run."""

        from fileinfo.tools.filesystem import mount_info

        return mount_info(self)

    @cached_property
    def inode(self) -> os.stat_result:
        return os.stat(self.target)


__all__ = ["InspectionContext", "TargetNotFound", "ToolProbe", "resolve_target"]
