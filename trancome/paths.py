"""Path helpers."""

from __future__ import annotations

import os
from pathlib import Path


def expand_path(path: str) -> str:
    """Replace a leading ``~`` with the user's home directory.

    Paths that do not start with ``~`` are returned unchanged. Everything
    after the ``~`` is joined onto the home directory, so ``~name`` becomes
    ``<home>/name``.

    Raises OSError if the home directory cannot be determined.
    """
    if not path or path[0] != "~":
        return path

    try:
        home = str(Path.home())
    except (RuntimeError, KeyError) as exc:
        raise OSError(f"failed to get home directory: {exc}") from exc

    rest = path[1:].lstrip("/\\")
    return os.path.normpath(os.path.join(home, rest)) if rest else os.path.normpath(home)