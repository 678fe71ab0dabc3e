"""
Path utilities for locating coverage inputs.

Filesystem access made while searching for tix, mix and source files goes
through a ``FileSystemProvider`` so that tests can swap in an in-memory
filesystem instead of building directory trees on disk.
"""
from typing import Union, Optional, Protocol, runtime_checkable
from pathlib import Path
import os
from hpcreport import logger


@runtime_checkable
class FileSystemProvider(Protocol):
    """Protocol defining the filesystem operations the resolver needs."""

    def resolve_path(self, path: Path) -> Path:
        """Resolve a path to its absolute canonical form."""
        ...

    def make_relative(self, path: Path, base: Path) -> Path:
        """Make path relative to base directory."""
        ...

    def check_file_exists(self, path: Path) -> bool:
        """Check if file exists and is a regular file."""
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Read the whole file."""
        ...


class StandardFileSystemProvider:
    """Filesystem provider backed by pathlib."""

    def resolve_path(self, path: Path) -> Path:
        """Resolve a path to its absolute canonical form with error handling."""
        try:
            return path.resolve()
        except (OSError, RuntimeError) as e:
            logger.error(f"Failed to resolve path {path}: {e}")
            raise ValueError(f"Cannot resolve path {path}: {e}") from e

    def make_relative(self, path: Path, base: Path) -> Path:
        """Make path relative to base directory."""
        try:
            return path.relative_to(base)
        except ValueError as e:
            raise ValueError(f"Path {path} is not within base directory {base}") from e

    def check_file_exists(self, path: Path) -> bool:
        """Check if file exists, treating permission problems as absence."""
        try:
            return path.is_file()
        except (OSError, PermissionError) as e:
            logger.warning(f"Cannot check file existence for {path}: {e}")
            return False

    def read_bytes(self, path: Path) -> bytes:
        with open(path, "rb") as f:
            return f.read()


_default_filesystem_provider = StandardFileSystemProvider()


def normalize_path_separators(path: Union[str, Path]) -> str:
    """
    Normalize path separators to the current platform's.

    Mix files record the source path as the compiler saw it, so a report built
    on Windows from artifacts produced elsewhere may carry forward slashes.

    Example:
        >>> # On Unix
        >>> normalize_path_separators('src\\Data\\Map.hs')
        'src/Data/Map.hs'
    """
    path_str = str(path)
    if os.sep == '\\':
        return path_str.replace('/', '\\')
    return path_str.replace('\\', '/')


def get_absolute_path(
    path: Union[str, Path],
    fs_provider: Optional[FileSystemProvider] = None
) -> Path:
    """Return the absolute, symlink-resolved form of ``path``."""
    provider = fs_provider or _default_filesystem_provider
    return provider.resolve_path(Path(path))


def get_relative_path(
    path: Union[str, Path],
    base_dir: Union[str, Path],
    fs_provider: Optional[FileSystemProvider] = None
) -> Path:
    """
    Express ``path`` relative to ``base_dir``.

    Both arguments are resolved first.

    Raises:
        ValueError: If ``path`` is not under ``base_dir``
    """
    provider = fs_provider or _default_filesystem_provider
    return provider.make_relative(
        provider.resolve_path(Path(path)),
        provider.resolve_path(Path(base_dir)),
    )


def check_file_exists(
    file_path: Union[str, Path],
    fs_provider: Optional[FileSystemProvider] = None
) -> bool:
    provider = fs_provider or _default_filesystem_provider
    return provider.check_file_exists(Path(file_path))


def read_file_bytes(
    file_path: Union[str, Path],
    fs_provider: Optional[FileSystemProvider] = None
) -> bytes:
    """Read a whole file through the active provider."""
    provider = fs_provider or _default_filesystem_provider
    return provider.read_bytes(Path(file_path))


# Test-specific utility functions

def set_filesystem_provider_for_testing(provider: FileSystemProvider) -> FileSystemProvider:
    """
    Replace the default filesystem provider.

    Returns:
        Previously active filesystem provider (for restoration)

    Note:
        This function is intended for test use only.
    """
    global _default_filesystem_provider
    previous_provider = _default_filesystem_provider
    _default_filesystem_provider = provider
    logger.debug(f"Filesystem provider changed for testing: {type(provider).__name__}")
    return previous_provider


def restore_filesystem_provider(provider: FileSystemProvider) -> None:
    """Restore a provider returned by ``set_filesystem_provider_for_testing``."""
    global _default_filesystem_provider
    _default_filesystem_provider = provider
    logger.debug(f"Filesystem provider restored after testing: {type(provider).__name__}")


def get_current_filesystem_provider() -> FileSystemProvider:
    return _default_filesystem_provider
