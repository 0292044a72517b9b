"""Report sections, one collector per heading, in report order.

Every collector takes the run's :class:`InspectionContext` and returns the
lines printed under its heading. Collectors never share state besides the
context's cached mount and inode lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from fileinfo.core.context import InspectionContext
from fileinfo.tools import attributes, audit, content, digest, filesystem, inode, ooxml

Collector = Callable[[InspectionContext], List[str]]


@dataclass(frozen=True)
class SectionSpec:
    """A heading, its collector and the tools whose absence degrades it."""

    key: str
    title: str
    collector: Collector
    tools: Tuple[str, ...] = ()

    def heading(self, ctx: InspectionContext) -> str:
        return self.title.format(
            timezone=ctx.config.timezone, window=ctx.config.audit_since
        )


def resolve_and_fs(ctx: InspectionContext) -> List[str]:
    lines = [f"path:{ctx.target}"]

    if ctx.probe.available("findmnt"):
        described = filesystem.describe_mount(ctx.mount)
        lines.append(described or "(findmnt returned no mount information)")
    else:
        lines.append(ctx.probe.missing("findmnt"))

    if ctx.probe.available("df"):
        lines.extend(filesystem.df_type(ctx))
    else:
        lines.append(ctx.probe.missing("df"))
    return lines


def stat_section(ctx: InspectionContext) -> List[str]:
    if not ctx.probe.available("stat"):
        return [ctx.probe.missing("stat")]
    return filesystem.stat_lines(ctx) or ["(stat returned no output)"]


def acl_section(ctx: InspectionContext) -> List[str]:
    return [
        *attributes.acl_lines(ctx),
        *attributes.xattr_lines(ctx),
        *attributes.flag_lines(ctx),
    ]


def hardlink_section(ctx: InspectionContext) -> List[str]:
    links = ctx.inode.st_nlink
    lines = [f"links: {links}"]
    if not ctx.config.hardlink_search:
        lines.append("(hardlink search disabled by configuration)")
        return lines
    if links > 1 and not ctx.probe.available("find"):
        lines.append(ctx.probe.missing("find"))
        return lines

    paths = filesystem.hardlinks(ctx)
    lines.extend(paths or ["(no paths found for this inode)"])
    return lines


def mount_options_section(ctx: InspectionContext) -> List[str]:
    if not ctx.probe.available("findmnt"):
        return [ctx.probe.missing("findmnt")]
    options = ctx.mount.options
    if not options:
        return ["(mount options unavailable)"]
    return [options, f"atime_policy: {filesystem.atime_policy(options)}"]


SECTIONS: Sequence[SectionSpec] = (
    SectionSpec("resolve", "RESOLVE & FS", resolve_and_fs, ("findmnt", "df")),
    SectionSpec("stat", "STAT ({timezone})", stat_section, ("stat",)),
    SectionSpec(
        "inode_times",
        "LOW-LEVEL INODE TIMES",
        inode.low_level_times,
        ("findmnt",),
    ),
    SectionSpec(
        "attributes",
        "ACLS / XATTRS / ATTRS",
        acl_section,
        ("getfacl", "getfattr", "lsattr"),
    ),
    SectionSpec("hashes", "HASHES", digest.digest_lines, ("sha256sum", "sha512sum")),
    SectionSpec("file_type", "FILE TYPE", content.file_type, ("file",)),
    SectionSpec("exiftool", "EXIFTOOL (DOCX META)", content.exif_lines, ("exiftool",)),
    SectionSpec("docx", "DOCX core.xml/app.xml", ooxml.docx_lines, ("unzip",)),
    SectionSpec("hardlinks", "HARDLINKS (same inode)", hardlink_section),
    SectionSpec(
        "mount_options",
        "MOUNT OPTIONS (atime policy)",
        mount_options_section,
        ("findmnt",),
    ),
    SectionSpec(
        "auditd",
        "AUDITD ({window}, if available)",
        audit.audit_events,
        ("ausearch",),
    ),
)


__all__ = ["SECTIONS", "Collector", "SectionSpec"]
