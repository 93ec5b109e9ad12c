"""Folder listing and tree printing."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import TextIO

from fileio.errors import FileOperationError
from fileio.logging import LogSpan
from fileio.paths import StrPath, get_last_path_component

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


def list_folder_contents(path: StrPath) -> list[Path]:
    """List the immediate children of a folder.

    Args:
        path: Folder to list

    Returns:
        Child paths (joined onto `path`), sorted

    Raises:
        FileOperationError: If `path` isn't a folder or can't be read

    Example:
        >>> list_folder_contents("src")
        [PosixPath('src/cd.py'), PosixPath('src/copy.py')]
    """
    with LogSpan(span="listing.list", path=str(path)) as s:
        p = Path(path)
        if not p.is_dir():
            raise FileOperationError(f"The provided path is not a folder: '{path}'", path)
        try:
            entries = sorted(p.iterdir())
        except OSError as e:
            raise FileOperationError(f"Failed to read folder '{path}': {e}", path) from e
        s.add(entryCount=len(entries))
        return entries


def write_folder_tree(path: StrPath, output: TextIO) -> None:
    """Write the folder tree under `path` to a text stream.

    The first line is `path` as given. Each entry below it shows only its
    last path component; folders are expanded depth first and entries are
    sorted at every level:

        src
        ├── lib
        │   └── util.py
        └── main.py

    Args:
        path: Root folder
        output: Stream to write to

    Raises:
        FileOperationError: If `path` or any sub-folder can't be listed
    """
    with LogSpan(span="listing.tree", path=str(path)) as s:
        node_count = 0

        def write_entries(folder: Path, prefix: str) -> None:
            nonlocal node_count

            entries = list_folder_contents(folder)
            for i, entry in enumerate(entries):
                node_count += 1
                is_last = i == len(entries) - 1
                connector = LAST_BRANCH if is_last else BRANCH
                output.write(f"{prefix}{connector}{get_last_path_component(entry)}\n")

                # Symlinked folders are shown but not expanded
                if entry.is_dir() and not entry.is_symlink():
                    write_entries(entry, prefix + (SPACE if is_last else PIPE))

        root = Path(path)
        if not root.is_dir():
            raise FileOperationError(f"The provided path is not a folder: '{path}'", path)

        output.write(f"{root}\n")
        write_entries(root, "")
        s.add(nodeCount=node_count)


def format_folder_tree(path: StrPath) -> str:
    """Return the folder tree under `path` as a string.

    See `write_folder_tree` for the layout.
    """
    buffer = io.StringIO()
    write_folder_tree(path, buffer)
    return buffer.getvalue()


def print_folder_tree(path: StrPath) -> None:
    """Print the folder tree under `path` to standard output.

    Example:
        print_folder_tree("src")
    """
    write_folder_tree(path, sys.stdout)
