"""Report assembly."""

from .assembler import Report, ReportAssembler, SectionResult
from .sections import SECTIONS, SectionSpec

__all__ = ["Report", "ReportAssembler", "SECTIONS", "SectionResult", "SectionSpec"]
