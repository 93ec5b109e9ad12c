"""Exception and warning types raised by fileio."""

from __future__ import annotations

import os
from pathlib import Path


class FileIOError(Exception):
    """Base class for all fileio errors."""


class DirectoryChangeError(FileIOError):
    """The working directory could not be changed to the requested target."""

    def __init__(self, message: str, path: str | os.PathLike[str]) -> None:
        super().__init__(message)
        self.path = Path(path)


class FileOperationError(FileIOError):
    """A copy, delete, create, read, write or list operation failed."""

    def __init__(self, message: str, path: str | os.PathLike[str]) -> None:
        super().__init__(message)
        self.path = Path(path)


class RestoreWarning(UserWarning):
    """Restoring the previous working directory failed during guard teardown.

    Emitted through `warnings.warn`, never raised by fileio itself.
    """
