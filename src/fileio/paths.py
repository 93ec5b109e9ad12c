"""Path helpers.

All functions accept `str` or any `os.PathLike` and return `pathlib.Path`
objects or plain strings. Paths are taken as given: nothing here resolves
symlinks or normalizes `..` components.
"""

from __future__ import annotations

import os
from pathlib import Path

StrPath = str | os.PathLike[str]


def to_path(path: StrPath) -> Path:
    """Convert a `str` or path-like object to a `Path`."""
    return Path(path)


def get_home() -> Path:
    """Get the current user's home directory.

    Raises:
        RuntimeError: If the home directory can't be determined
    """
    return Path.home()


def get_cwd() -> Path:
    """Get the absolute path of the current working directory.

    Raises:
        FileNotFoundError: If the working directory has been deleted
    """
    return Path.cwd()


def get_last_path_component(path: StrPath) -> str:
    """Get the last component of a path.

    Unlike `get_file_name`, this also works for paths such as "/" or "..".

    Example:
        >>> get_last_path_component("folder/subfolder/file.txt")
        'file.txt'
        >>> get_last_path_component("/")
        '/'

    Raises:
        ValueError: If the path is empty
    """
    parts = Path(path).parts
    if not parts:
        raise ValueError("Cannot get the last component of an empty path")
    return parts[-1]


def get_file_name(path: StrPath) -> str:
    """Get the file name (with extension) from a path.

    Raises:
        ValueError: If the path has no file name (e.g. "/" or "..")
    """
    p = Path(path)
    if not p.name or p.name == "..":
        raise ValueError(f"Path has no file name: {path}")
    return p.name


def get_file_stem(path: StrPath) -> str:
    """Get the file name without its final extension.

    Raises:
        ValueError: If the path has no file name
    """
    get_file_name(path)
    return Path(path).stem


def get_file_extension(path: StrPath) -> str:
    """Get the final file extension without the leading dot.

    Returns an empty string when the path has no extension.

    Example:
        >>> get_file_extension("archive.tar.gz")
        'gz'
        >>> get_file_extension("Makefile")
        ''
    """
    return Path(path).suffix.removeprefix(".")
