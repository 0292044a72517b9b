"""Utility helpers for the inspection report."""

from . import cmd, hashing

__all__ = [
    "cmd",
    "hashing",
]
