"""Hash helper utilities."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable

SUPPORTED_ALGORITHMS = {"sha256", "sha512"}

_DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1 MiB


def _get_hasher(algorithm: str) -> "hashlib._Hash":
    """Return a configured :mod:`hashlib` object for ``algorithm``."""

    algorithm = algorithm.lower()
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm)


def compute_hashes(
    path: Path,
    algorithms: Iterable[str],
    *,
    chunk_size: int = _DEFAULT_CHUNK_SIZE,
) -> dict:
    """Compute multiple hashes in a single streaming pass.

    The file at ``path`` is read once and every requested hash algorithm is
    updated chunk-wise.
    """

    if chunk_size <= 0:
        raise ValueError("chunk_size must be a positive integer")

    algorithms = list(dict.fromkeys(algo.lower() for algo in algorithms))
    if not algorithms:
        return {}

    hashers = {algo: _get_hasher(algo) for algo in algorithms}

    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            for hasher in hashers.values():
                hasher.update(chunk)

    return {algo: hashers[algo].hexdigest() for algo in algorithms}


def sha256_text(text: str) -> str:
    """Return the SHA-256 digest of ``text`` encoded as UTF-8."""

    return hashlib.sha256(text.encode("utf-8")).hexdigest()


__all__ = [
    "SUPPORTED_ALGORITHMS",
    "compute_hashes",
    "sha256_text",
]
