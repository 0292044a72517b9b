"""Shared helpers for the fileinfo test-suite."""

from __future__ import annotations

import types
import zipfile
from pathlib import Path
from typing import Iterable, Optional

from fileinfo.core.config import get_config
from fileinfo.core.context import InspectionContext, ToolProbe
from fileinfo.tools.filesystem import MountInfo

CORE_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
    xmlns:dc="http://purl.org/dc/elements/1.1/"
    xmlns:dcterms="http://purl.org/dc/terms/"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <dc:title>Quarterly
      Report</dc:title>
  <dc:creator>Jane Doe</dc:creator>
  <cp:lastModifiedBy>John Roe</cp:lastModifiedBy>
  <dcterms:created xsi:type="dcterms:W3CDTF">2024-01-12T09:15:00Z</dcterms:created>
  <dcterms:modified xsi:type="dcterms:W3CDTF">2024-02-03T17:45:30Z</dcterms:modified>
</cp:coreProperties>
"""

APP_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Properties xmlns="http://schemas.openxmlformats.org/officeDocument/2006/extended-properties"
    xmlns:vt="http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes">
  <Template>Normal.dotm</Template>
  <TotalTime>42</TotalTime>
  <Pages>7</Pages>
  <Application>Microsoft Office Word</Application>
  <Company>Example &amp; Sons</Company>
</Properties>
"""

EXPECTED_PROPERTIES = {
    "created": "2024-01-12T09:15:00Z",
    "modified": "2024-02-03T17:45:30Z",
    "creator": "Jane Doe",
    "title": "Quarterly Report",
    "application": "Microsoft Office Word",
    "total_edit_minutes": "42",
    "pages": "7",
}


def build_docx(path: Path, members: Optional[dict] = None) -> Path:
    """Write a minimal OOXML container to ``path``."""

    if members is None:
        members = {"docProps/core.xml": CORE_XML, "docProps/app.xml": APP_XML}
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("word/document.xml", "<w:document/>")
        for name, text in members.items():
            archive.writestr(name, text)
    return path


def fake_which(tools: Iterable[str]):
    available = set(tools)
    return lambda name: f"/usr/bin/{name}" if name in available else None


def completed(stdout: str = "", stderr: str = "", returncode: int = 0) -> types.SimpleNamespace:
    """Return a simple object mimicking subprocess.CompletedProcess."""

    return types.SimpleNamespace(stdout=stdout, stderr=stderr, returncode=returncode)


def make_context(
    target: Path,
    tools: Iterable[str] = (),
    *,
    mount: Optional[MountInfo] = None,
    **overrides,
) -> InspectionContext:
    """Build an inspection context with a controlled tool set."""

    ctx = InspectionContext(
        target=Path(target),
        config=get_config(overrides=overrides),
        probe=ToolProbe(which=fake_which(tools)),
    )
    if mount is not None:
        ctx.__dict__["mount"] = mount
    return ctx


__all__ = [
    "APP_XML",
    "CORE_XML",
    "EXPECTED_PROPERTIES",
    "build_docx",
    "completed",
    "fake_which",
    "make_context",
]
