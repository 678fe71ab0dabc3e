"""Utility helpers shared across hpcreport."""

from .paths import (
    FileSystemProvider,
    StandardFileSystemProvider,
    check_file_exists,
    get_absolute_path,
    get_relative_path,
    normalize_path_separators,
    read_file_bytes,
)

__all__ = [
    "FileSystemProvider",
    "StandardFileSystemProvider",
    "check_file_exists",
    "get_absolute_path",
    "get_relative_path",
    "normalize_path_separators",
    "read_file_bytes",
]
