"""File and folder operations.

Thin wrappers over `shutil` and `pathlib` that raise FileOperationError
(chaining the underlying OSError) instead of returning silently:

    copy_file("config.yaml", "backup/config.yaml", create_dirs=True)
    delete_folder("build", missing_ok=True)

Missing parent folders are an error unless `create_dirs=True` is passed or
`create_dirs: true` is set in fileio.yaml. Text is read and written with the
configured encoding (utf-8 by default).
"""

from __future__ import annotations

import shutil
from pathlib import Path

from fileio.config import get_config
from fileio.errors import FileOperationError
from fileio.logging import LogSpan
from fileio.paths import StrPath


def _create_dirs_default(create_dirs: bool | None) -> bool:
    if create_dirs is None:
        return get_config().create_dirs
    return create_dirs


def _ensure_parent(path: Path, create_dirs: bool) -> None:
    """Make sure the parent folder of `path` exists.

    Raises:
        FileOperationError: If the parent is missing and can't or mustn't be created
    """
    parent = path.parent
    if parent.is_dir():
        return
    if parent.exists():
        raise FileOperationError(f"Parent is not a folder: '{parent}'", path)
    if not create_dirs:
        raise FileOperationError(
            f"Parent folder does not exist: '{parent}'. Use create_dirs=True to create it.",
            path,
        )
    create_folder(parent)


# ============================================================================
# Create
# ============================================================================


def create_folder(path: StrPath) -> None:
    """Create a folder and any missing parent folders.

    Does nothing if the folder already exists.

    Args:
        path: Folder to create

    Raises:
        FileOperationError: If the folder can't be created (e.g. a file is in the way)
    """
    with LogSpan(span="files.create_folder", path=str(path)) as s:
        p = Path(path)
        if p.is_dir():
            s.add(created=False)
            return
        try:
            p.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Failed to create folder at '{path}': {e}", path) from e
        s.add(created=True)


def create_folder_for_file(path: StrPath) -> None:
    """Create the parent folder of a file path (and its parents).

    Args:
        path: File path whose parent folder should exist

    Raises:
        FileOperationError: If the parent folder can't be created
    """
    parent = Path(path).parent
    create_folder(parent)


# ============================================================================
# Copy
# ============================================================================


def copy_file(source: StrPath, dest: StrPath, *, create_dirs: bool | None = None) -> None:
    """Copy a file, overwriting the destination if it exists.

    The copy is byte-identical. Permission bits are copied too.

    Args:
        source: File to copy
        dest: Destination file path
        create_dirs: Create missing parent folders of `dest` (default: from config)

    Raises:
        FileOperationError: If `source` isn't a file, the destination parent
            doesn't exist, or the copy fails

    Example:
        copy_file("Cargo.toml", "folder/Cargo_new.toml", create_dirs=True)
    """
    with LogSpan(span="files.copy_file", source=str(source), dest=str(dest)) as s:
        src = Path(source)
        dst = Path(dest)

        if not src.exists():
            raise FileOperationError(f"Source file not found: '{source}'", source)
        if not src.is_file():
            raise FileOperationError(f"Source is not a file: '{source}'", source)
        if dst.is_dir():
            raise FileOperationError(f"Destination is a folder: '{dest}'", dest)

        _ensure_parent(dst, _create_dirs_default(create_dirs))

        try:
            shutil.copyfile(src, dst)
            shutil.copymode(src, dst)
        except OSError as e:
            raise FileOperationError(
                f"Failed to copy file from '{source}' to '{dest}': {e}", source
            ) from e

        s.add(copied=True, size=src.stat().st_size)


def copy_folder(source: StrPath, dest: StrPath, *, create_dirs: bool | None = None) -> None:
    """Copy a folder and everything in it.

    Every file under `source` is copied to the same relative path under
    `dest`. Sub-folders (including empty ones) are created as needed and
    existing files in `dest` are overwritten. Symlinks are followed.

    Args:
        source: Folder to copy
        dest: Destination folder
        create_dirs: Create missing parent folders of `dest` (default: from config)

    Raises:
        FileOperationError: If `source` isn't a folder, the destination parent
            doesn't exist, or any file fails to copy

    Example:
        copy_folder("src", "folder/src", create_dirs=True)
    """
    with LogSpan(span="files.copy_folder", source=str(source), dest=str(dest)) as s:
        src = Path(source)
        dst = Path(dest)

        if not src.exists():
            raise FileOperationError(f"Source folder not found: '{source}'", source)
        if not src.is_dir():
            raise FileOperationError(f"Source is not a folder: '{source}'", source)
        if dst.exists() and not dst.is_dir():
            raise FileOperationError(f"Destination is not a folder: '{dest}'", dest)
        if dst.resolve().is_relative_to(src.resolve()):
            raise FileOperationError(
                f"Cannot copy folder '{source}' into itself ('{dest}')", dest
            )

        _ensure_parent(dst, _create_dirs_default(create_dirs))

        try:
            shutil.copytree(src, dst, symlinks=False, dirs_exist_ok=True)
        except shutil.Error as e:
            # copytree collects per-file failures as (src, dst, reason) tuples
            failures = e.args[0] if e.args and isinstance(e.args[0], list) else []
            if not failures:
                raise FileOperationError(
                    f"Failed to copy folder from '{source}' to '{dest}': {e}", source
                ) from e
            first_src, _, reason = failures[0]
            raise FileOperationError(
                f"Failed to copy {len(failures)} item(s) from '{source}' to '{dest}' "
                f"(first: '{first_src}': {reason})",
                source,
            ) from e
        except OSError as e:
            raise FileOperationError(
                f"Failed to copy folder from '{source}' to '{dest}': {e}", source
            ) from e

        s.add(copied=True, fileCount=sum(1 for p in dst.rglob("*") if p.is_file()))


# ============================================================================
# Delete
# ============================================================================


def delete_file(path: StrPath, *, missing_ok: bool = False) -> None:
    """Delete a file.

    Symlinks are removed, not followed.

    Args:
        path: File to delete
        missing_ok: If True, a missing file is not an error (default: False)

    Raises:
        FileOperationError: If the file doesn't exist (unless `missing_ok`),
            is a folder, or can't be removed
    """
    with LogSpan(span="files.delete_file", path=str(path)) as s:
        p = Path(path)

        if not p.exists() and not p.is_symlink():
            if missing_ok:
                s.add(deleted=False)
                return
            raise FileOperationError(f"File not found: '{path}'", path)
        if p.is_dir() and not p.is_symlink():
            raise FileOperationError(
                f"Path is a folder, use delete_folder(): '{path}'", path
            )

        try:
            p.unlink()
        except OSError as e:
            raise FileOperationError(f"Failed to delete file at '{path}': {e}", path) from e
        s.add(deleted=True)


def delete_folder(path: StrPath, *, missing_ok: bool = False) -> None:
    """Delete a folder and all of its contents.

    Args:
        path: Folder to delete
        missing_ok: If True, a missing folder is not an error (default: False)

    Raises:
        FileOperationError: If the folder doesn't exist (unless `missing_ok`),
            is a file, or can't be removed
    """
    with LogSpan(span="files.delete_folder", path=str(path)) as s:
        p = Path(path)

        if not p.exists():
            if missing_ok:
                s.add(deleted=False)
                return
            raise FileOperationError(f"Folder not found: '{path}'", path)
        if not p.is_dir() or p.is_symlink():
            raise FileOperationError(
                f"Path is not a folder, use delete_file(): '{path}'", path
            )

        try:
            shutil.rmtree(p)
        except OSError as e:
            raise FileOperationError(f"Failed to delete folder at '{path}': {e}", path) from e
        s.add(deleted=True)


# ============================================================================
# Load and Save
# ============================================================================


def load_file_as_string(path: StrPath) -> str:
    """Read a whole text file into a string.

    Args:
        path: File to read

    Line endings are kept as they are in the file (no newline translation).

    Returns:
        The file content, decoded with the configured encoding

    Raises:
        FileOperationError: If the file can't be read or decoded
    """
    with LogSpan(span="files.load", path=str(path)) as s:
        encoding = get_config().encoding
        try:
            with Path(path).open(encoding=encoding, newline="") as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise FileOperationError(
                f"Failed to decode file at '{path}' as {encoding}: {e}", path
            ) from e
        except OSError as e:
            raise FileOperationError(f"Failed to read file at '{path}': {e}", path) from e
        s.add(contentLen=len(content))
        return content


def save_string_to_file(
    content: str, path: StrPath, *, create_dirs: bool | None = None
) -> None:
    """Write a string to a file, replacing any existing content.

    The file is written in place. If it can't be opened for writing (for
    example because it is read-only) its original content is left intact.
    Line endings in `content` are written unchanged.

    Args:
        content: Text to write
        path: Destination file
        create_dirs: Create missing parent folders (default: from config)

    Raises:
        FileOperationError: If the parent folder doesn't exist or the write fails
    """
    with LogSpan(span="files.save", path=str(path), contentLen=len(content)) as s:
        p = Path(path)
        if p.is_dir():
            raise FileOperationError(f"Path is a folder: '{path}'", path)

        _ensure_parent(p, _create_dirs_default(create_dirs))

        try:
            data = content.encode(get_config().encoding)
        except UnicodeEncodeError as e:
            raise FileOperationError(
                f"Failed to encode content for '{path}': {e}", path
            ) from e

        try:
            with p.open("wb") as f:
                f.write(data)
        except OSError as e:
            raise FileOperationError(f"Failed to write to file '{path}': {e}", path) from e
        s.add(bytesWritten=len(data))
