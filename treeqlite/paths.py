"""Virtual path resolution.

Virtual paths look like ``~/users`` or ``~/music/albums``. They resolve to
absolute POSIX paths under the configured root whatever the host OS, so the
paths embedded in ATTACH statements and matched in error messages are the
same everywhere.
"""

import os
import posixpath
import re
from pathlib import Path

from treeqlite.config import TreeQLiteConfig
from treeqlite.errors import InvalidPathError
from treeqlite.utils.constants import ROOT_MARKER

_ROOT_MARKER_RE = re.compile(r"^" + re.escape(ROOT_MARKER))

# Characters allowed in a physical path handed to ATTACH; ":" only in a drive prefix (C:/...)
_SAFE_PATH_RE = re.compile(r"(?:[A-Za-z]:)?[\w .,@+=~/-]+")

_ALIAS_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _absolute_root(root_path: str) -> str:
    root = Path(os.fspath(root_path)).as_posix()
    return posixpath.normpath(posixpath.join(Path.cwd().as_posix(), root))


def resolve_db_path(config: TreeQLiteConfig, virtual_path: str) -> str:
    """Resolve a virtual path to an absolute physical path (without suffix).

    ``~/`` is replaced with ``./`` and the result is joined onto the root.
    Paths without the marker are resolved relative to the root as-is. No
    filesystem access happens here.

    Raises:
        InvalidPathError: The path resolves to the root itself or outside it
    """
    root = _absolute_root(config.root_path)
    relative = _ROOT_MARKER_RE.sub("./", virtual_path, count=1)
    resolved = posixpath.normpath(posixpath.join(root, relative))

    root_prefix = root if root.endswith("/") else root + "/"
    if not resolved.startswith(root_prefix) or resolved == root:
        raise InvalidPathError(
            f"Virtual path {virtual_path!r} does not resolve inside root {config.root_path!r}"
        )

    return resolved


def validate_attach_target(alias: str, physical_path: str) -> None:
    """Allow-list check for values interpolated into an ATTACH statement."""
    if not _ALIAS_RE.fullmatch(alias):
        raise InvalidPathError(f"Invalid database alias: {alias!r}")
    if not _SAFE_PATH_RE.fullmatch(physical_path):
        raise InvalidPathError(f"Unsafe characters in database path: {physical_path!r}")
