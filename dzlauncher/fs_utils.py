"""Filesystem helpers."""

import os
import shutil
from pathlib import Path


def list_dir(path, lowercase=False):
    """Return the entry names in ``path``, optionally lowercased.

    An empty path yields an empty list.
    """
    if not os.fspath(path):
        return []
    names = os.listdir(path)
    if lowercase:
        return [name.lower() for name in names]
    return names


def remove_all(path):
    """Remove ``path`` and everything below it; return how many entries were removed."""
    target = Path(path)
    if not target.is_symlink() and not target.exists():
        return 0
    if target.is_dir() and not target.is_symlink():
        removed = 1 + sum(
            len(dirs) + len(files) for _, dirs, files in os.walk(target, followlinks=False)
        )
        shutil.rmtree(target)
        return removed
    target.unlink()
    return 1