"""SHA-256/SHA-512 digests through coreutils with an in-process fallback."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from fileinfo.core.logger import get_module_logger
from fileinfo.utils.cmd import run_cmd
from fileinfo.utils.hashing import compute_hashes

if TYPE_CHECKING:  # pragma: no cover
    from fileinfo.core.context import InspectionContext

logger = get_module_logger("tools.digest")

DIGEST_TOOLS: Tuple[Tuple[str, str], ...] = (
    ("sha256sum", "sha256"),
    ("sha512sum", "sha512"),
)


def _tool_digest(ctx: "InspectionContext", tool: str) -> Tuple[Optional[List[str]], str]:
    if not ctx.probe.available(tool):
        return None, f"{tool} not installed; computed in-process."

    result = run_cmd([tool, "--", ctx.target], timeout=ctx.timeout)
    output = result.stdout.strip()
    if result.returncode == 0 and output:
        return output.splitlines(), ""

    logger.warning("%s exited with %s; hashing in-process", tool, result.returncode)
    return None, f"{tool} failed; computed in-process."


def digest_lines(ctx: "InspectionContext") -> List[str]:
    """Return ``<digest>  <path>`` lines for every supported algorithm.

    When a coreutils binary is missing or fails, the digest is computed with
    :mod:`hashlib` instead and the line is preceded by a note saying so.
    """

    outcomes: Dict[str, Tuple[Optional[List[str]], str]] = {
        algorithm: _tool_digest(ctx, tool) for tool, algorithm in DIGEST_TOOLS
    }

    pending = [algorithm for algorithm, (lines, _) in outcomes.items() if lines is None]
    computed = compute_hashes(ctx.target, pending) if pending else {}

    rendered: List[str] = []
    for _, algorithm in DIGEST_TOOLS:
        lines, note = outcomes[algorithm]
        if lines is not None:
            rendered.extend(lines)
            continue
        rendered.append(note)
        rendered.append(f"{computed[algorithm]}  {ctx.target}")
    return rendered


__all__ = ["DIGEST_TOOLS", "digest_lines"]
