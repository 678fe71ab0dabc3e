"""
Locating tix, mix and source files.

A mix path declared by a tix file (``<module>.mix``) and a source path declared
by a mix file are both relative to directories the caller knows about: the
build tool's hpc output directory, extra ``--mix`` directories, the package
root and so on. Resolution tries the declared path verbatim, then under each
candidate root in order, and reports every location it tried when nothing
matches. No guessing happens beyond the supplied candidates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Type, Union

from hpcreport import logger
from hpcreport.exceptions import (
    MixNotFoundError,
    SearchError,
    SrcNotFoundError,
    TixNotFoundError,
    log_and_raise,
)
from hpcreport.utils.paths import FileSystemProvider, check_file_exists

PathLike = Union[str, Path]

MIX_SUFFIX = ".mix"


def candidate_locations(declared: PathLike, roots: Iterable[PathLike]) -> List[Path]:
    """
    List the locations tried for ``declared``, in order and without repeats.

    The declared path itself comes first, followed by ``root / declared`` for
    each root. An absolute declared path joined under a root is the declared
    path again, so it is tried once.
    """
    declared_path = Path(declared)
    seen = set()
    locations: List[Path] = []
    for location in [declared_path, *(Path(root) / declared_path for root in roots)]:
        key = str(location)
        if key not in seen:
            seen.add(key)
            locations.append(location)
    return locations


def resolve(
    declared: PathLike,
    roots: Sequence[PathLike],
    *,
    error: Type[SearchError] = SearchError,
    fs_provider: Optional[FileSystemProvider] = None,
) -> Path:
    """
    Return the first existing file among the candidate locations of ``declared``.

    Args:
        declared: Path as recorded by the tix or mix file
        roots: Candidate root directories, searched in the order given
        error: ``SearchError`` subclass raised when nothing matches
        fs_provider: Optional filesystem provider for dependency injection

    Returns:
        The matching location, as tried (not made absolute)

    Raises:
        SearchError: ``error`` with every location tried, in order
    """
    tried: List[Path] = []
    for location in candidate_locations(declared, roots):
        tried.append(location)
        if check_file_exists(location, fs_provider):
            logger.debug(f"Found {declared} at {location}")
            return location
        logger.debug(f"Not found: {location}")

    log_and_raise(error(declared, tried), logger)


def mix_path_for_module(module_name: str) -> Path:
    """Declared mix path of a tix module, e.g. ``pkg-0.1/Data.Foo.mix``."""
    return Path(module_name + MIX_SUFFIX)


def find_mix(
    module_name: str,
    mix_dirs: Sequence[PathLike],
    fs_provider: Optional[FileSystemProvider] = None,
) -> Path:
    """Locate the mix file of ``module_name`` under ``mix_dirs``."""
    return resolve(
        mix_path_for_module(module_name),
        mix_dirs,
        error=MixNotFoundError,
        fs_provider=fs_provider,
    )


def find_src(
    source_path: PathLike,
    src_dirs: Sequence[PathLike],
    fs_provider: Optional[FileSystemProvider] = None,
) -> Path:
    """Locate a source file named by a mix file under ``src_dirs``."""
    return resolve(source_path, src_dirs, error=SrcNotFoundError, fs_provider=fs_provider)


def find_tix(
    tix_path: PathLike,
    fs_provider: Optional[FileSystemProvider] = None,
) -> Path:
    """Check that an explicitly given tix file exists."""
    path = Path(tix_path)
    if not check_file_exists(path, fs_provider):
        log_and_raise(TixNotFoundError(path), logger)
    return path


__all__ = [
    "MIX_SUFFIX",
    "candidate_locations",
    "resolve",
    "mix_path_for_module",
    "find_mix",
    "find_src",
    "find_tix",
]
