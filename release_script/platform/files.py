"""Filesystem operations behind the gateway and the mirror publisher."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "clear_directory", "copy_tree_contents", "remove_path"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Replace ``path`` in one step; readers never see a half-written manifest."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staging: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            delete=False,
        ) as handle:
            staging = Path(handle.name)
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        staging.replace(path)
    except BaseException:
        if staging is not None:
            staging.unlink(missing_ok=True)
        raise


def remove_path(path: Path) -> None:
    """Delete a file or directory tree; missing paths are ignored."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def clear_directory(path: Path, *, keep: frozenset[str] = frozenset({".git"})) -> list[Path]:
    """Delete every entry of ``path`` except the names in ``keep``.

    Returns:
        The removed entries, sorted.
    """
    removed: list[Path] = []
    for entry in sorted(path.iterdir()):
        if entry.name in keep:
            continue
        remove_path(entry)
        removed.append(entry)
    return removed


def copy_tree_contents(source: Path, dest: Path) -> None:
    """Copy the contents of ``source`` into ``dest``, overwriting files."""
    dest.mkdir(parents=True, exist_ok=True)
    for entry in sorted(source.iterdir()):
        target = dest / entry.name
        if entry.is_dir() and not entry.is_symlink():
            shutil.copytree(entry, target, symlinks=True, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, target, follow_symlinks=False)
