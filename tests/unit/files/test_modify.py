"""Unit tests for in-place string replacement."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from fileio import FileOperationError

if TYPE_CHECKING:
    from collections.abc import Callable

skip_if_root = pytest.mark.skipif(
    hasattr(os, "geteuid") and os.geteuid() == 0,
    reason="root ignores file permissions",
)


# =============================================================================
# Single file
# =============================================================================


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file(work_dir: Path) -> None:
    """Verify every occurrence is replaced."""
    from fileio import replace_str_in_file

    path = work_dir / "file.txt"
    path.write_text("foo bar foo\nfoo\n")

    assert replace_str_in_file(path, "foo", "bar") is True

    content = path.read_text()
    assert "foo" not in content
    assert content == "bar bar bar\nbar\n"


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file_no_match(work_dir: Path) -> None:
    """Verify a file without the pattern isn't rewritten."""
    from fileio import replace_str_in_file

    path = work_dir / "file.txt"
    path.write_text("nothing here")
    mtime = path.stat().st_mtime_ns

    with patch("fileio.modify.save_string_to_file") as mock_save:
        assert replace_str_in_file(path, "foo", "bar") is False

    mock_save.assert_not_called()
    assert path.stat().st_mtime_ns == mtime


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file_empty_old_string(work_dir: Path) -> None:
    """Verify an empty search string is rejected."""
    from fileio import replace_str_in_file

    with pytest.raises(ValueError, match="empty"):
        replace_str_in_file(work_dir / "file.txt", "", "x")


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file_missing(work_dir: Path) -> None:
    """Verify a missing file raises."""
    from fileio import replace_str_in_file

    with pytest.raises(FileOperationError):
        replace_str_in_file(work_dir / "missing.txt", "foo", "bar")


@skip_if_root
@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file_read_only(work_dir: Path) -> None:
    """Verify a read-only file raises and keeps its content."""
    from fileio import replace_str_in_file

    path = work_dir / "file.txt"
    path.write_text("foo")
    path.chmod(0o444)
    try:
        with pytest.raises(FileOperationError, match="Failed to write"):
            replace_str_in_file(path, "foo", "bar")
    finally:
        path.chmod(0o644)

    assert path.read_text() == "foo"


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file_permission_denied(
    work_dir: Path, deny_writes: Callable[[Path], None]
) -> None:
    """Verify a write refused by the OS raises and keeps the content."""
    from fileio import replace_str_in_file

    path = work_dir / "file.txt"
    path.write_text("foo")
    deny_writes(path)

    with pytest.raises(FileOperationError, match="Failed to write") as exc_info:
        replace_str_in_file(path, "foo", "bar")

    assert isinstance(exc_info.value.__cause__, PermissionError)
    assert path.read_text() == "foo"


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file_keeps_crlf(work_dir: Path) -> None:
    """Verify CRLF line endings are written back unchanged."""
    from fileio import replace_str_in_file

    path = work_dir / "dos.txt"
    path.write_bytes(b"line1 foo\r\nline2\r\n")

    assert replace_str_in_file(path, "foo", "bar") is True
    assert path.read_bytes() == b"line1 bar\r\nline2\r\n"


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_file_matches_crlf(work_dir: Path) -> None:
    """Verify a search string containing CRLF matches the file content."""
    from fileio import replace_str_in_file

    path = work_dir / "dos.txt"
    path.write_bytes(b"one\r\ntwo\r\n")

    assert replace_str_in_file(path, "one\r\ntwo", "one two") is True
    assert path.read_bytes() == b"one two\r\n"


# =============================================================================
# Batch
# =============================================================================


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files(sample_tree: Path) -> None:
    """Verify all files under the folder are processed recursively."""
    from fileio import replace_str_in_files

    summary = replace_str_in_files(sample_tree, "foo", "bar")

    assert (sample_tree / "a.txt").read_text() == "alpha bar\n"
    assert (sample_tree / "b.py").read_text() == "print('bar')\n"
    assert (sample_tree / "sub" / "nested.txt").read_text() == "nested bar bar\n"
    assert (sample_tree / "sub" / "deeper" / "leaf.md").read_text() == "no match here\n"

    assert set(summary.changed) == {
        sample_tree / "a.txt",
        sample_tree / "b.py",
        sample_tree / "sub" / "nested.txt",
    }
    assert summary.unchanged == [sample_tree / "sub" / "deeper" / "leaf.md"]
    assert summary.failed == []
    assert summary.ok
    assert summary.total == 4


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files_single_file(sample_tree: Path) -> None:
    """Verify a file path processes just that file."""
    from fileio import replace_str_in_files

    summary = replace_str_in_files(sample_tree / "a.txt", "foo", "bar")

    assert summary.changed == [sample_tree / "a.txt"]
    assert (sample_tree / "b.py").read_text() == "print('foo')\n"


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files_continues_after_failure(
    sample_tree: Path, log_messages: list[str]
) -> None:
    """Verify one failing file is logged and the rest are still processed."""
    from fileio import replace_str_in_files
    from fileio.files import save_string_to_file as real_save

    blocked = sample_tree / "a.txt"

    def flaky_save(content: str, path: Path, **kwargs: object) -> None:
        if Path(path) == blocked:
            raise FileOperationError(f"Failed to write to file '{path}'", path)
        real_save(content, path, **kwargs)

    with patch("fileio.modify.save_string_to_file", side_effect=flaky_save):
        summary = replace_str_in_files(sample_tree, "foo", "bar")

    assert summary.failed == [blocked]
    assert not summary.ok
    assert blocked.read_text() == "alpha foo\n"
    assert (sample_tree / "b.py").read_text() == "print('bar')\n"
    assert (sample_tree / "sub" / "nested.txt").read_text() == "nested bar bar\n"
    assert any(
        f"Failed to replace string in file '{blocked}'" in m for m in log_messages
    )


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files_skips_undecodable(sample_tree: Path) -> None:
    """Verify binary files are reported as failures without aborting the batch."""
    from fileio import replace_str_in_files

    blob = sample_tree / "blob.bin"
    blob.write_bytes(b"\xff\xfefoo\x80")

    summary = replace_str_in_files(sample_tree, "foo", "bar")

    assert summary.failed == [blob]
    assert blob.read_bytes() == b"\xff\xfefoo\x80"
    assert len(summary.changed) == 3


@skip_if_root
@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files_read_only_file(sample_tree: Path) -> None:
    """Verify a read-only file is left intact while others change."""
    from fileio import replace_str_in_files

    read_only = sample_tree / "a.txt"
    read_only.chmod(0o444)
    try:
        summary = replace_str_in_files(sample_tree, "foo", "bar")
    finally:
        read_only.chmod(0o644)

    assert summary.failed == [read_only]
    assert read_only.read_text() == "alpha foo\n"
    assert (sample_tree / "b.py").read_text() == "print('bar')\n"


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files_permission_denied(
    sample_tree: Path, deny_writes: Callable[[Path], None], log_messages: list[str]
) -> None:
    """Verify a file the OS refuses to write is recorded and the rest still change."""
    from fileio import replace_str_in_files

    blocked = sample_tree / "a.txt"
    deny_writes(blocked)

    summary = replace_str_in_files(sample_tree, "foo", "bar")

    assert summary.failed == [blocked]
    assert blocked.read_text() == "alpha foo\n"
    assert (sample_tree / "b.py").read_text() == "print('bar')\n"
    assert (sample_tree / "sub" / "nested.txt").read_text() == "nested bar bar\n"
    assert any(
        f"Failed to replace string in file '{blocked}'" in m for m in log_messages
    )


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files_missing_path(work_dir: Path) -> None:
    """Verify a missing root path is an error, not an empty summary."""
    from fileio import replace_str_in_files

    with pytest.raises(FileOperationError, match="Path not found"):
        replace_str_in_files(work_dir / "missing", "foo", "bar")


@pytest.mark.unit
@pytest.mark.files
def test_replace_str_in_files_empty_old_string(sample_tree: Path) -> None:
    """Verify an empty search string is rejected up front."""
    from fileio import replace_str_in_files

    with pytest.raises(ValueError, match="empty"):
        replace_str_in_files(sample_tree, "", "x")
