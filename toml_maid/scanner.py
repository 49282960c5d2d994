"""Recursive discovery of TOML files under a folder."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable

from pathspec import GitIgnoreSpec

from .config import CONFIG_FILE

GITIGNORE = ".gitignore"

logger = logging.getLogger(__name__)


def is_excluded(relative_path: Path, excludes: Iterable[str]) -> bool:
    text = relative_path.as_posix()
    return any(fnmatchcase(text, pattern) for pattern in excludes)


def load_gitignore(directory: Path) -> GitIgnoreSpec | None:
    """Read the ``.gitignore`` of ``directory``, if it has one."""
    path = directory / GITIGNORE
    if not path.is_file():
        return None
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Error while reading \"{path}\": {e}")
        return None
    return GitIgnoreSpec.from_lines(lines)


def is_ignored(path: Path, is_dir: bool, specs: dict[Path, GitIgnoreSpec]) -> bool:
    """Check ``path`` against the ignore files of the folders above it.

    Each pattern set applies relative to the folder holding its file.
    """
    for base, spec in specs.items():
        if not path.is_relative_to(base):
            continue
        text = path.relative_to(base).as_posix()
        if spec.match_file(f"{text}/" if is_dir else text):
            return True
    return False


def find_files_recursively(
    root: str | Path,
    extension: str = "toml",
    excludes: Iterable[str] = (),
    use_gitignore: bool = True,
) -> list[Path]:
    """List files with ``extension`` below ``root``.

    Hidden entries, the configuration file and any path matching one of the
    ``excludes`` globs (relative to ``root``) are skipped. With
    ``use_gitignore`` the ``.gitignore`` files found from ``root`` downwards
    are honoured as well. Excluded or ignored folders are not descended into.
    """
    root = Path(root)
    excludes = list(excludes)
    suffix = f".{extension}"
    specs: dict[Path, GitIgnoreSpec] = {}
    matches: list[Path] = []

    def on_error(exc: OSError) -> None:
        logger.warning(f"Error while scanning \"{exc.filename}\": {exc.strerror}")

    def skip(path: Path, is_dir: bool) -> bool:
        return is_excluded(path.relative_to(root), excludes) or is_ignored(path, is_dir, specs)

    for directory, dirnames, filenames in os.walk(root, onerror=on_error):
        current = Path(directory)
        if use_gitignore and GITIGNORE in filenames:
            spec = load_gitignore(current)
            if spec is not None:
                specs[current] = spec

        dirnames[:] = sorted(name for name in dirnames if not name.startswith(".") and not skip(current / name, True))
        for name in sorted(filenames):
            path = current / name
            if name.startswith(".") or path.suffix != suffix or name == CONFIG_FILE:
                continue
            if skip(path, False):
                continue
            matches.append(path)

    return matches


__all__ = ["find_files_recursively", "is_excluded", "is_ignored", "load_gitignore"]
