"""Filesystem implementations for simsh."""

from .memory_fs import MemoryFs, normalize_path

__all__ = [
    "MemoryFs",
    "normalize_path",
]
