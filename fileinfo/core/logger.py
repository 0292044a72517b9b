#!/usr/bin/env python3
"""
Inspection Logging System
Diagnostics go to stderr so stdout carries only the report
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

from fileinfo.core.time_utils import utc_isoformat, utc_slug


class InspectorFormatter(logging.Formatter):
    """Custom formatter with color support for console"""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool = True, stream=None):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_color = use_color
        self.stream = stream if stream is not None else sys.stderr

    def format(self, record):
        levelname = record.levelname
        if self.use_color and self.stream.isatty() and levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
            )
        return super().format(record)


def setup_logging(
    log_dir: Optional[Path] = None,
    level: str = "WARNING",
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Setup inspection logging

    Args:
        log_dir: Directory for log files
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_console: Enable console logging on stderr

    Returns:
        Logger instance
    """
    logger = logging.getLogger("fileinfo")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    console_level = getattr(logging, level.upper(), logging.WARNING)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(InspectorFormatter(use_color=True))
        logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"fileinfo_{utc_slug()}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG for file
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


class InvocationAudit:
    """
    Append-only audit trail for one inspection run

    Records report start, every privilege escalation and report completion
    together with the digest of the emitted report.
    """

    def __init__(self, audit_log_path: Path):
        """
        Initialize audit logger

        Args:
            audit_log_path: Path to audit log file
        """
        self.audit_log_path = Path(audit_log_path)
        self.audit_log_path.parent.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("fileinfo.audit")
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

        # Append mode, never truncate
        self._handler = logging.FileHandler(
            self.audit_log_path, mode="a", encoding="utf-8"
        )
        self._handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - AUDIT - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        self.logger.addHandler(self._handler)

    def log(self, event: str, details: Optional[dict] = None):
        message = f"{event}"
        if details:
            message += f" | Details: {json.dumps(details, sort_keys=True)}"

        self.logger.info(message)

    def log_report_start(self, target: Path, actor: str):
        self.log(
            f"REPORT_START: {target}",
            {"actor": actor, "timestamp": utc_isoformat()},
        )

    def log_escalation(self, command: str, launcher: str):
        """Log a command that is about to run with elevated privileges"""
        self.log(
            f"ESCALATION: {command}",
            {"launcher": launcher, "timestamp": utc_isoformat()},
        )

    def log_report_complete(self, target: Path, report_sha256: str, degraded: list):
        self.log(
            f"REPORT_COMPLETE: {target}",
            {
                "degraded_sections": degraded,
                "report_sha256": report_sha256,
                "timestamp": utc_isoformat(),
            },
        )

    def close(self):
        self.logger.removeHandler(self._handler)
        self._handler.close()


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get logger for a specific module

    Args:
        module_name: Module name

    Returns:
        Logger instance
    """
    return logging.getLogger(f"fileinfo.{module_name}")
