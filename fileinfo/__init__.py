"""Forensic file inspection report."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:  # pragma: no cover - depends on package metadata
    __version__ = version("fileinfo-report")
except PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "1.0.0-dev"
