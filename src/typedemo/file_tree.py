from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_BLACKLIST = (".git", "target", "__pycache__")


@dataclass(slots=True)
class Folder:
    files: list[str] = field(default_factory=list)
    folders: list[str] = field(default_factory=list)


def read_file_tree(
    root: Path,
    exclude: Path,
    blacklist: Iterable[str] = DEFAULT_BLACKLIST,
) -> Folder:
    """List the direct children of `root` for the sidebar.

    Entries on the blacklist are hidden, as is any entry that leads to
    `exclude` (the breadcrumb already shows that path).
    """

    hidden = set(blacklist)
    folder = Folder()
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.debug("Cannot list %s: %s", root, exc)
        return folder

    for entry in entries:
        if entry.name in hidden:
            continue
        if exclude == entry or entry in exclude.parents:
            continue
        try:
            if entry.is_dir():
                folder.folders.append(entry.name)
            elif entry.is_file():
                folder.files.append(entry.name)
        except OSError:
            continue
    return folder


def path_breadcrumb(root: Path, focused: Path) -> list[str]:
    """Path segments from `root` down to `focused`, indented by depth."""

    try:
        relative = focused.relative_to(root)
    except ValueError:
        return []
    return [" " * (index * 2) + part for index, part in enumerate(relative.parts)]
