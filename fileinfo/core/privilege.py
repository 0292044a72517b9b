"""Explicit, audited privilege escalation for device-level queries.

Only commands that need raw device or audit-log access are wrapped. The
policy is off unless ``escalate_privileges`` is enabled, and the default
launcher is ``sudo -n`` so a missing credential fails instead of prompting.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, List, Optional, Sequence

from fileinfo.core.logger import InvocationAudit, get_module_logger
from fileinfo.utils.cmd import quote

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import ToolProbe

logger = get_module_logger("privilege")


class PrivilegePolicy:
    """Decide how a privileged command is launched."""

    def __init__(
        self,
        enabled: bool,
        launcher: Sequence[str],
        probe: "ToolProbe",
        audit: Optional[InvocationAudit] = None,
    ):
        self.enabled = enabled
        self.launcher = list(launcher)
        self.probe = probe
        self.audit = audit

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def wrap(self, command: Sequence[str]) -> List[str]:
        """Return ``command`` prefixed with the launcher when escalation applies."""

        command = list(command)
        if self.is_root():
            return command

        if not self.enabled:
            logger.info("Running without elevation (policy disabled): %s", quote(command))
            return command

        if not self.launcher or not self.probe.available(self.launcher[0]):
            logger.warning(
                "Privilege launcher unavailable (%s); running unprivileged",
                " ".join(self.launcher) or "<empty>",
            )
            return command

        wrapped = [*self.launcher, *command]
        logger.info("Escalating: %s", quote(wrapped))
        if self.audit is not None:
            self.audit.log_escalation(quote(command), " ".join(self.launcher))
        return wrapped

    def hint(self) -> str:
        """Guidance appended to sections that came back empty without privilege."""

        if self.is_root():
            return ""
        if not self.enabled:
            return "re-run as root or set FILEINFO_ESCALATE_PRIVILEGES=true"
        return "elevation via '{}' did not succeed".format(" ".join(self.launcher))


__all__ = ["PrivilegePolicy"]
