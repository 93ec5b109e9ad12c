"""Easy interfaces for file i/o.

Convenience wrappers around common filesystem operations:

    from fileio import cd, copy_file, replace_str_in_files

    with cd("build"):
        copy_file("../README.md", "README.md")

    summary = replace_str_in_files("docs", "old_name", "new_name")
    print(summary.failed)

Logging goes through loguru and is silent until `configure_logging()` is
called. Defaults such as text encoding are read from `fileio.yaml` (see
`fileio.config`).
"""

from fileio.workdir import DirectoryGuard, cd
from fileio.config import FileIOConfig, get_config, load_config
from fileio.errors import (
    DirectoryChangeError,
    FileIOError,
    FileOperationError,
    RestoreWarning,
)
from fileio.files import (
    copy_file,
    copy_folder,
    create_folder,
    create_folder_for_file,
    delete_file,
    delete_folder,
    load_file_as_string,
    save_string_to_file,
)
from fileio.listing import (
    format_folder_tree,
    list_folder_contents,
    print_folder_tree,
    write_folder_tree,
)
from fileio.logging import LogSpan, configure_logging
from fileio.modify import ReplaceSummary, replace_str_in_file, replace_str_in_files
from fileio.paths import (
    get_cwd,
    get_file_extension,
    get_file_name,
    get_file_stem,
    get_home,
    get_last_path_component,
    to_path,
)

__version__ = "0.1.0"

__all__ = [
    # Working directory
    "DirectoryGuard",
    "cd",
    # Errors
    "DirectoryChangeError",
    "FileIOError",
    "FileOperationError",
    "RestoreWarning",
    # Config and logging
    "FileIOConfig",
    "LogSpan",
    "configure_logging",
    "get_config",
    "load_config",
    # Files and folders
    "copy_file",
    "copy_folder",
    "create_folder",
    "create_folder_for_file",
    "delete_file",
    "delete_folder",
    "load_file_as_string",
    "save_string_to_file",
    # Listing
    "format_folder_tree",
    "list_folder_contents",
    "print_folder_tree",
    "write_folder_tree",
    # String replacement
    "ReplaceSummary",
    "replace_str_in_file",
    "replace_str_in_files",
    # Paths
    "get_cwd",
    "get_file_extension",
    "get_file_name",
    "get_file_stem",
    "get_home",
    "get_last_path_component",
    "to_path",
]
