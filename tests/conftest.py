"""Shared fixtures for fileio tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture(autouse=True)
def restore_cwd() -> Generator[None, None, None]:
    """Put the working directory back and drop leaked guards after each test."""
    from fileio import workdir

    original = os.getcwd()
    yield
    os.chdir(original)
    workdir._active_guards.clear()


@pytest.fixture(autouse=True)
def reset_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Make every test start from default configuration."""
    from fileio import config

    monkeypatch.delenv("FILEIO_CONFIG", raising=False)
    config._config = None
    yield
    config._config = None


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Capture loguru messages (all levels) emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="TRACE")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Resolved temp directory (so it compares equal to Path.cwd())."""
    return tmp_path.resolve()


@pytest.fixture
def sample_tree(work_dir: Path) -> Path:
    """Create a small folder structure:

    src/
        a.txt
        b.py
        sub/
            nested.txt
            deeper/
                leaf.md
    """
    root = work_dir / "src"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("alpha foo\n")
    (root / "b.py").write_text("print('foo')\n")
    (root / "sub" / "nested.txt").write_text("nested foo foo\n")
    (root / "sub" / "deeper" / "leaf.md").write_text("no match here\n")
    return root


@pytest.fixture
def deny_writes(monkeypatch: pytest.MonkeyPatch) -> Callable[[Path], None]:
    """Make opening the given files for writing fail with PermissionError.

    Works the same whether or not the tests run as root.
    """
    denied: set[Path] = set()
    real_open = Path.open

    def guarded_open(self: Path, mode: str = "r", *args: object, **kwargs: object):
        if self in denied and any(c in mode for c in "wax+"):
            raise PermissionError(13, "Permission denied", str(self))
        return real_open(self, mode, *args, **kwargs)

    monkeypatch.setattr(Path, "open", guarded_open)
    return denied.add
