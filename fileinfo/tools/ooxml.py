"""Office Open XML document properties from ``docProps/core.xml`` and ``app.xml``.

Two extraction strategies produce the same keys: a namespace-aware
``xmlstarlet`` query when the tool is installed, otherwise a regex pass over
the raw XML that tolerates prefixes, attributes and line breaks. Empty
fields are omitted by both.
"""

from __future__ import annotations

import html
import re
import zipfile
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from fileinfo.core.logger import get_module_logger
from fileinfo.utils.cmd import run_cmd

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import InspectionContext

logger = get_module_logger("tools.ooxml")

CORE_MEMBER = "docProps/core.xml"
APP_MEMBER = "docProps/app.xml"

PROPERTY_KEYS = (
    "created",
    "modified",
    "creator",
    "title",
    "application",
    "total_edit_minutes",
    "pages",
)

NAMESPACES = {
    "cp": "http://schemas.openxmlformats.org/package/2006/metadata/core-properties",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
    "ep": "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties",
}

# (report key, xpath for xmlstarlet, local element name for the regex pass)
CORE_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("created", "/cp:coreProperties/dcterms:created", "created"),
    ("modified", "/cp:coreProperties/dcterms:modified", "modified"),
    ("creator", "/cp:coreProperties/dc:creator", "creator"),
    ("title", "/cp:coreProperties/dc:title", "title"),
)
APP_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("application", "(//ep:Application | //Application)[1]", "Application"),
    ("total_edit_minutes", "(//ep:TotalTime | //TotalTime)[1]", "TotalTime"),
    ("pages", "(//ep:Pages | //Pages)[1]", "Pages"),
)

_WHITESPACE = re.compile(r"\s+")
_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)


def _normalise(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def _text_content(raw: str) -> str:
    """Decode character references outside CDATA sections, keep CDATA verbatim."""

    pieces = []
    position = 0
    for match in _CDATA.finditer(raw):
        pieces.append(html.unescape(raw[position : match.start()]))
        pieces.append(match.group(1))
        position = match.end()
    pieces.append(html.unescape(raw[position:]))
    return "".join(pieces)


@dataclass(frozen=True)
class Part:
    member: str
    label: str
    fields: Tuple[Tuple[str, str, str], ...]


PARTS = (
    Part(CORE_MEMBER, "core.xml", CORE_FIELDS),
    Part(APP_MEMBER, "app.xml", APP_FIELDS),
)


class XmlStarletExtractor:
    """Namespace-aware structured query through ``xmlstarlet sel``."""

    name = "xmlstarlet"
    label_suffix = ""

    def __init__(self, timeout: int = 300):
        self.timeout = timeout

    def command(self, fields: Tuple[Tuple[str, str, str], ...]) -> List[str]:
        command = ["xmlstarlet", "sel"]
        for prefix, uri in NAMESPACES.items():
            command.extend(["-N", f"{prefix}={uri}"])
        command.append("-t")
        for key, xpath, _ in fields:
            command.extend(["-v", f'concat("{key}:", normalize-space({xpath}))', "-n"])
        return command

    def extract(self, xml: str, fields: Tuple[Tuple[str, str, str], ...]) -> Dict[str, str]:
        result = run_cmd(self.command(fields), timeout=self.timeout, input=xml)
        if result.returncode != 0:
            logger.warning("xmlstarlet exited with %s: %s", result.returncode, result.stderr.strip())

        wanted = {key for key, _, _ in fields}
        values: Dict[str, str] = {}
        for line in result.stdout.splitlines():
            key, sep, value = line.partition(":")
            value = _normalise(value)
            if sep and key in wanted and value:
                values.setdefault(key, value)
        return values


class RegexExtractor:
    """Best-effort text extraction when no XML tool is available."""

    name = "regex"
    label_suffix = " (regex fallback)"

    @staticmethod
    def pattern(local_name: str) -> re.Pattern:
        tag = rf"(?:[\w.-]+:)?{re.escape(local_name)}"
        return re.compile(rf"<{tag}(?:\s[^>]*)?>(.*?)</{tag}\s*>", re.DOTALL)

    def extract(self, xml: str, fields: Tuple[Tuple[str, str, str], ...]) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for key, _, local_name in fields:
            match = self.pattern(local_name).search(xml)
            if not match:
                continue
            value = _normalise(_text_content(match.group(1)))
            if value:
                values[key] = value
        return values


def select_extractor(ctx: "InspectionContext"):
    if ctx.probe.available("xmlstarlet"):
        return XmlStarletExtractor(timeout=ctx.timeout)
    return RegexExtractor()


def is_zip_container(ctx: "InspectionContext") -> bool:
    """``unzip -l`` succeeds only for ZIP archives; stdlib check otherwise."""

    if ctx.probe.available("unzip"):
        result = run_cmd(["unzip", "-l", ctx.target], timeout=ctx.timeout)
        return result.returncode == 0
    return zipfile.is_zipfile(ctx.target)


def read_member(ctx: "InspectionContext", member: str) -> Optional[str]:
    """Return the text of ``member`` or ``None`` when it is not in the archive."""

    if ctx.probe.available("unzip"):
        result = run_cmd(["unzip", "-p", ctx.target, member], timeout=ctx.timeout)
        if result.returncode != 0 or not result.stdout.strip():
            return None
        return result.stdout

    try:
        with zipfile.ZipFile(ctx.target) as archive:
            data = archive.read(member)
    except KeyError:
        return None
    except zipfile.BadZipFile as exc:
        logger.warning("Could not read %s from %s: %s", member, ctx.target, exc)
        return None
    return data.decode("utf-8", errors="replace")


def document_properties(ctx: "InspectionContext", extractor=None) -> Dict[str, Dict[str, str]]:
    """Return extracted properties keyed by part label, in report order.

    Parts missing from the archive are absent from the result; a present
    part with no populated fields maps to an empty dict.
    """

    extractor = extractor or select_extractor(ctx)
    properties: Dict[str, Dict[str, str]] = {}
    for part in PARTS:
        xml = read_member(ctx, part.member)
        if xml is None:
            continue
        properties[part.label] = extractor.extract(xml, part.fields)
    return properties


def docx_lines(ctx: "InspectionContext") -> List[str]:
    if not is_zip_container(ctx):
        return ["(Not a ZIP container; skipping DOCX internals)"]

    lines: List[str] = []
    if not ctx.probe.available("unzip"):
        lines.append("unzip not installed; reading archive in-process.")

    extractor = select_extractor(ctx)
    properties = document_properties(ctx, extractor)
    if not properties:
        lines.append(f"(no {CORE_MEMBER} or {APP_MEMBER} in container)")
        return lines

    for part in PARTS:
        if part.label not in properties:
            continue
        values = properties[part.label]
        lines.append(f"-- {part.label}{extractor.label_suffix} --")
        lines.extend(f"{key}:{values[key]}" for key, _, _ in part.fields if key in values)
    return lines


__all__ = [
    "APP_MEMBER",
    "CORE_MEMBER",
    "PROPERTY_KEYS",
    "RegexExtractor",
    "XmlStarletExtractor",
    "docx_lines",
    "document_properties",
    "is_zip_container",
    "read_member",
    "select_extractor",
]
