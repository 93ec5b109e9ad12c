"""Scoped working-directory changes.

`cd()` changes the process working directory and returns a DirectoryGuard.
Leaving the guard's `with` block (normally, by early return or by exception)
changes back to the directory that was current before the guard existed:

    with cd("build"):
        run_build()
    # back where we started

The working directory is process-wide state. Guards must be strictly nested
and stay on the thread that created them: creating a guard while another
thread holds one raises DirectoryChangeError. A guard left unrestored by a
thread that has since exited is dropped (with a warning) so it can't block
other threads forever. Nothing here makes concurrent directory changes safe.

Restoring happens exactly once per guard. If it fails (for example because
the previous directory was removed while the guard was active) a
RestoreWarning is emitted and the failure is logged; the error is not raised,
so it can't mask an exception already propagating out of the block.
"""

from __future__ import annotations

import os
import threading
import warnings
from pathlib import Path
from types import TracebackType
from typing import NoReturn

from loguru import logger

from fileio.errors import DirectoryChangeError, RestoreWarning
from fileio.logging import LogSpan
from fileio.paths import StrPath

# Guards that changed directory and haven't restored yet, innermost last
_active_guards: list[DirectoryGuard] = []
_guards_lock = threading.Lock()


def _drop_orphaned_guards() -> None:
    """Forget guards whose owning thread has exited without restoring them.

    Must be called with `_guards_lock` held.
    """
    orphaned = [g for g in _active_guards if not g._owner.is_alive()]
    for guard in orphaned:
        logger.warning(
            f"Dropping guard for '{guard.target_directory}': thread "
            f"{guard._owner.name} exited without restoring '{guard.previous_directory}'"
        )
        _active_guards.remove(guard)


class DirectoryGuard:
    """Changes the working directory on creation and restores it on exit.

    Attributes:
        previous_directory: Working directory captured before the change
        target_directory: Absolute working directory after the change
    """

    def __init__(self, path: StrPath) -> None:
        """Change the working directory to `path`.

        Args:
            path: Existing directory to change into

        Raises:
            DirectoryChangeError: If `path` is missing, not a directory, not
                accessible, or another thread holds an active guard
        """
        self._owner = threading.current_thread()
        self._restored = False

        with LogSpan(span="workdir.cd", path=str(path)) as s, _guards_lock:
            _drop_orphaned_guards()
            foreign = [g for g in _active_guards if g._owner is not self._owner]
            if foreign:
                s.add(error="foreign_thread")
                raise DirectoryChangeError(
                    f"Working directory is held by a guard on another thread "
                    f"(in '{foreign[-1].target_directory}')",
                    path,
                )

            try:
                previous = Path.cwd()
            except OSError as e:
                raise DirectoryChangeError(
                    f"Failed to get the current working directory: {e}", path
                ) from e

            try:
                os.chdir(path)
            except FileNotFoundError as e:
                raise DirectoryChangeError(f"Directory not found: '{path}'", path) from e
            except NotADirectoryError as e:
                raise DirectoryChangeError(f"Not a directory: '{path}'", path) from e
            except OSError as e:
                raise DirectoryChangeError(
                    f"Failed to change directory to '{path}': {e}", path
                ) from e

            self.previous_directory = previous
            self.target_directory = Path.cwd()
            _active_guards.append(self)
            s.add(previous=str(previous), depth=len(_active_guards))

    @property
    def restored(self) -> bool:
        """True once the previous working directory has been restored."""
        return self._restored

    def restore(self) -> bool:
        """Change back to the previous working directory.

        Only the first call does anything. Failures are reported as a
        RestoreWarning instead of being raised.

        Returns:
            True if this call changed back to the previous directory; False
            if restoring failed or the guard was already restored
        """
        return self._restore(stacklevel=3)

    def _restore(self, stacklevel: int) -> bool:
        if self._restored:
            return False

        span = LogSpan(span="workdir.restore", path=str(self.previous_directory))
        with span as s, _guards_lock:
            self._restored = True

            if _active_guards and _active_guards[-1] is not self:
                logger.warning(
                    f"Restoring '{self.previous_directory}' out of order: "
                    f"guard for '{_active_guards[-1].target_directory}' is still active"
                )
                s.add(outOfOrder=True)
            if self in _active_guards:
                _active_guards.remove(self)

            try:
                os.chdir(self.previous_directory)
            except OSError as e:
                message = (
                    f"Failed to restore working directory to "
                    f"'{self.previous_directory}': {e}"
                )
                s.add(error=str(e))
                logger.warning(message)
                warnings.warn(message, RestoreWarning, stacklevel=stacklevel)
                return False

            return True

    def __enter__(self) -> DirectoryGuard:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._restore(stacklevel=3)

    def __copy__(self) -> NoReturn:
        raise TypeError("DirectoryGuard can't be copied")

    def __deepcopy__(self, memo: dict[int, object]) -> NoReturn:
        raise TypeError("DirectoryGuard can't be copied")

    def __repr__(self) -> str:
        state = "restored" if self._restored else "active"
        return (
            f"DirectoryGuard(previous={str(self.previous_directory)!r}, "
            f"target={str(self.target_directory)!r}, {state})"
        )


def cd(path: StrPath) -> DirectoryGuard:
    """Change the working directory until the returned guard exits.

    Args:
        path: Existing directory to change into

    Returns:
        DirectoryGuard to use as a context manager

    Raises:
        DirectoryChangeError: If the directory can't be entered

    Example:
        >>> with cd("src"):
        ...     print(get_cwd())
    """
    return DirectoryGuard(path)
