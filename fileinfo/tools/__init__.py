"""Guarded wrappers around the external inspection tooling.

Each module probes for its binaries through the run's
:class:`~fileinfo.core.context.ToolProbe` and degrades to an informational
line instead of raising when a tool is missing or returns nothing.
"""

from . import attributes, audit, content, digest, filesystem, inode, ooxml

__all__ = [
    "attributes",
    "audit",
    "content",
    "digest",
    "filesystem",
    "inode",
    "ooxml",
]
