"""In-memory file system providing the read capability scripts need."""

import posixpath
from typing import Optional


def normalize_path(path: str, cwd: str = "/") -> str:
    """Resolve a path against cwd and normalise it."""
    if not path.startswith("/"):
        path = posixpath.join(cwd, path)
    normalized = posixpath.normpath(path)
    # normpath keeps a leading "//"
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


class MemoryFs:
    """Flat path -> text file store.

    ``readable_by`` optionally restricts reads of a path to the listed
    users; a user without access gets PermissionError.
    """

    def __init__(
        self,
        initial_files: Optional[dict[str, str]] = None,
        readable_by: Optional[dict[str, set[str]]] = None,
    ):
        self._files: dict[str, str] = {}
        self._readable_by: dict[str, set[str]] = {}
        for path, content in (initial_files or {}).items():
            self._files[normalize_path(path)] = content
        for path, users in (readable_by or {}).items():
            self._readable_by[normalize_path(path)] = set(users)

    async def exists(self, path: str, user: Optional[str] = None) -> bool:
        return normalize_path(path) in self._files

    async def read_text(self, path: str, user: Optional[str] = None) -> str:
        full_path = normalize_path(path)
        if full_path not in self._files:
            raise FileNotFoundError(f"{path}: No such file or directory")
        allowed = self._readable_by.get(full_path)
        if allowed is not None and user not in allowed:
            raise PermissionError(f"{path}: Permission denied")
        return self._files[full_path]

