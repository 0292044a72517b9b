"""Command line interface for the forensic file inspection report."""

from __future__ import annotations

import os
from typing import Optional

import click
import yaml

from .core.config import InspectorConfig, get_config
from .core.context import InspectionContext, TargetNotFound, ToolProbe, resolve_target
from .core.logger import InvocationAudit, get_module_logger, setup_logging
from .core.privilege import PrivilegePolicy
from .report import ReportAssembler
from .utils.hashing import sha256_text

EXIT_USAGE = 1
EXIT_NOT_FOUND = 2

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

logger = get_module_logger("cli")


class ReportCommand(click.Command):
    """Single-path command whose usage errors exit with status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = EXIT_USAGE
            raise


def _actor() -> str:
    user = os.environ.get("SUDO_USER") or os.environ.get("USER") or "unknown"
    return f"{user} (euid {os.geteuid()})"


def _load_config(ctx: click.Context) -> InspectorConfig:
    try:
        return get_config()
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        click.echo(f"ERROR: invalid configuration: {exc}", err=True)
        ctx.exit(EXIT_USAGE)
        raise  # pragma: no cover - ctx.exit raises


@click.command(cls=ReportCommand, context_settings=CONTEXT_SETTINGS)
@click.argument("path", metavar="PATH")
@click.pass_context
def cli(ctx: click.Context, path: str) -> None:
    """Print a forensics-style report for PATH.

    \b
    Sections, in order:
      - resolved path, filesystem and df summary
      - full stat (UTC by default) including birth time when supported
      - low-level inode times (ext4 via debugfs, xfs via xfs_io)
      - ACLs, extended attributes and inode flags
      - SHA-256 and SHA-512 hashes
      - file type ('file -k') and exiftool metadata
      - DOCX core.xml/app.xml properties (xmlstarlet or regex fallback)
      - hardlinks, mount options (atime policy) and audit log events

    Missing tools degrade their own section only. Exit codes: 0 report
    printed, 1 usage error, 2 file not found. Settings come from FILEINFO_*
    environment variables or fileinfo.yaml in $FILEINFO_CONFIG_DIR.
    """

    try:
        target = resolve_target(path)
    except TargetNotFound:
        click.echo(f"ERROR: File not found: {path}", err=True)
        ctx.exit(EXIT_NOT_FOUND)

    config = _load_config(ctx)
    setup_logging(log_dir=config.log_dir, level=config.log_level)

    audit: Optional[InvocationAudit] = None
    if config.audit_log:
        audit = InvocationAudit(config.audit_log)
        audit.log_report_start(target, _actor())

    probe = ToolProbe()
    privilege = PrivilegePolicy(
        enabled=config.escalate_privileges,
        launcher=config.escalation_command,
        probe=probe,
        audit=audit,
    )
    inspection = InspectionContext(
        target=target, config=config, probe=probe, privilege=privilege
    )

    try:
        report = ReportAssembler().build(inspection)
        text = report.render()
        click.echo(text, nl=False)

        logger.debug("Tool availability: %s", probe.snapshot())
        if report.degraded:
            logger.info("Degraded sections: %s", ", ".join(report.degraded))
        if audit is not None:
            audit.log_report_complete(target, sha256_text(text), report.degraded)
    finally:
        if audit is not None:
            audit.close()


def main() -> None:
    """Console script entry point."""

    cli(prog_name="fileinfo")


__all__ = ["cli", "main"]


if __name__ == "__main__":  # pragma: no cover
    main()
