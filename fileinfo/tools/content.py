"""Guarded wrappers for content identification: ``file`` and ``exiftool``."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List

from fileinfo.utils.cmd import run_cmd

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import InspectionContext

EXIF_FIELDS = re.compile(
    r"Create|Modify|Author|Application|Company|Title|Revision|Producer|Creator|Pages",
    re.IGNORECASE,
)


def file_type(ctx: "InspectionContext") -> List[str]:
    """``file -k``: keep going after the first match to list every signature."""

    if not ctx.probe.available("file"):
        return [ctx.probe.missing("file")]
    result = run_cmd(["file", "-k", "--", ctx.target], timeout=ctx.timeout)
    return result.stdout.splitlines() or ["(file returned no description)"]


def exif_lines(ctx: "InspectionContext") -> List[str]:
    if not ctx.probe.available("exiftool"):
        return [ctx.probe.missing("exiftool")]
    result = run_cmd(["exiftool", "--", ctx.target], timeout=ctx.timeout)
    matched = [line for line in result.stdout.splitlines() if EXIF_FIELDS.search(line)]
    return matched or ["(no EXIF metadata or exiftool did not return fields)"]


__all__ = ["EXIF_FIELDS", "exif_lines", "file_type"]
