"""In-place string replacement in files.

`replace_str_in_file` works on a single file and raises on failure.
`replace_str_in_files` walks a folder and is best-effort: a file that can't
be read or written (binary content, permissions) is logged as a warning and
recorded in the returned summary, and the walk carries on.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from fileio.errors import FileOperationError
from fileio.files import load_file_as_string, save_string_to_file
from fileio.logging import LogSpan
from fileio.paths import StrPath


@dataclass
class ReplaceSummary:
    """Outcome of a batch replacement."""

    changed: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if every file was processed without error."""
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.changed) + len(self.unchanged) + len(self.failed)


def replace_str_in_file(path: StrPath, old_string: str, new_string: str) -> bool:
    """Replace every occurrence of `old_string` in a file.

    The file is only rewritten when `old_string` occurs in it.

    Args:
        path: File to modify
        old_string: Text to find
        new_string: Replacement text

    Returns:
        True if the file was changed

    Raises:
        ValueError: If `old_string` is empty
        FileOperationError: If the file can't be read or written; on a write
            failure the original content is left in place

    Example:
        replace_str_in_file("config.py", "DEBUG = False", "DEBUG = True")
    """
    if not old_string:
        raise ValueError("old_string cannot be empty")

    with LogSpan(
        span="modify.replace", path=str(path), oldLen=len(old_string), newLen=len(new_string)
    ) as s:
        content = load_file_as_string(path)

        count = content.count(old_string)
        if count == 0:
            s.add(replacements=0)
            return False

        save_string_to_file(content.replace(old_string, new_string), path, create_dirs=False)
        s.add(replacements=count)
        return True


def _iter_files(root: Path) -> list[Path]:
    """All regular files under `root`, in walk order.

    Unreadable sub-folders are logged and skipped. Symlinked folders are not
    followed.
    """
    if root.is_file():
        return [root]

    def on_error(e: OSError) -> None:
        logger.warning(f"Failed to read folder '{e.filename}': {e.strerror}")

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort()
        for name in sorted(filenames):
            entry = Path(dirpath) / name
            if entry.is_file():
                files.append(entry)
    return files


def replace_str_in_files(path: StrPath, old_string: str, new_string: str) -> ReplaceSummary:
    """Replace every occurrence of `old_string` in every file under `path`.

    Sub-folders are processed recursively. If `path` is a file, only that
    file is processed. A failure on one file doesn't stop the others: it is
    logged as a warning and listed in `ReplaceSummary.failed`.

    Args:
        path: Folder (or single file) to process
        old_string: Text to find
        new_string: Replacement text

    Returns:
        ReplaceSummary listing changed, unchanged and failed files

    Raises:
        ValueError: If `old_string` is empty
        FileOperationError: If `path` doesn't exist

    Example:
        summary = replace_str_in_files("docs", "v1.0", "v1.1")
        for failed in summary.failed:
            print(f"skipped {failed}")
    """
    if not old_string:
        raise ValueError("old_string cannot be empty")

    with LogSpan(span="modify.replace_all", path=str(path)) as s:
        root = Path(path)
        if not root.exists():
            raise FileOperationError(f"Path not found: '{path}'", path)

        summary = ReplaceSummary()
        for entry in _iter_files(root):
            try:
                changed = replace_str_in_file(entry, old_string, new_string)
            except FileOperationError as e:
                logger.warning(f"Failed to replace string in file '{entry}': {e}")
                summary.failed.append(entry)
                continue

            if changed:
                summary.changed.append(entry)
            else:
                summary.unchanged.append(entry)

        s.add(
            changed=len(summary.changed),
            unchanged=len(summary.unchanged),
            failed=len(summary.failed),
        )
        return summary
