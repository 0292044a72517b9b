"""Run report sections in order and render the text report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from fileinfo import __version__
from fileinfo.core.context import InspectionContext
from fileinfo.core.logger import get_module_logger
from fileinfo.core.time_utils import utc_display

from .sections import SECTIONS, SectionSpec

logger = get_module_logger("report")


@dataclass
class SectionResult:
    """Outcome of one report section"""

    key: str
    title: str
    lines: List[str] = field(default_factory=list)
    status: str = "ok"  # ok, degraded, failed
    errors: List[str] = field(default_factory=list)

    def render(self) -> str:
        return "\n".join([f"== {self.title} ==", *self.lines])


@dataclass
class Report:
    target: str
    generated: str
    sections: List[SectionResult] = field(default_factory=list)

    @property
    def degraded(self) -> List[str]:
        return [section.key for section in self.sections if section.status != "ok"]

    def render(self) -> str:
        preamble = f"fileinfo {__version__} report for {self.target} (generated {self.generated})"
        blocks = [preamble, *(section.render() for section in self.sections)]
        return "\n\n".join(blocks) + "\n"


class ReportAssembler:
    """Execute section collectors in fixed order, isolating their failures."""

    def __init__(self, sections: Optional[Sequence[SectionSpec]] = None):
        self.sections = list(SECTIONS if sections is None else sections)

    def run_section(self, spec: SectionSpec, ctx: InspectionContext) -> SectionResult:
        title = spec.heading(ctx)
        logger.debug("Collecting section: %s", title)

        try:
            lines = list(spec.collector(ctx))
        except Exception as exc:
            logger.warning("Section %s failed: %s", spec.key, exc)
            return SectionResult(
                key=spec.key,
                title=title,
                lines=[f"(section unavailable: {exc})"],
                status="failed",
                errors=[str(exc)],
            )

        missing = [tool for tool in spec.tools if not ctx.probe.available(tool)]
        status = "degraded" if missing else "ok"
        if missing:
            logger.info("Section %s degraded; missing: %s", spec.key, ", ".join(missing))
        return SectionResult(key=spec.key, title=title, lines=lines, status=status)

    def build(self, ctx: InspectionContext) -> Report:
        report = Report(target=str(ctx.target), generated=utc_display())
        for spec in self.sections:
            report.sections.append(self.run_section(spec, ctx))
        return report


__all__ = ["Report", "ReportAssembler", "SectionResult"]
