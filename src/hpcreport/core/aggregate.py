"""
Folding coverage records into per-file summaries.

Records name their source file as the compiler saw it. The aggregator resolves
that name against the source search directories once per distinct name, then
adds every record's hit count to each line its span covers and, for boolean
regions, to the true or false counter of the branch at that position. Counts
from different modules or targets that land in the same file simply add up.
"""

from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Union

from hpcreport import logger
from hpcreport.core.models import Aggregate, CoverageRecord
from hpcreport.discovery.resolver import find_src
from hpcreport.utils.paths import (
    FileSystemProvider,
    get_absolute_path,
    get_relative_path,
    normalize_path_separators,
)

PathLike = Union[str, Path]


class Aggregator:
    """
    Accumulates ``CoverageRecord`` objects into an ``Aggregate``.

    Args:
        src_dirs: Directories searched for source files, in order
        root: Project root; files under it are keyed by their path relative
            to it, all others by their absolute path
        fs_provider: Optional filesystem provider for dependency injection
    """

    def __init__(
        self,
        src_dirs: Sequence[PathLike] = (),
        root: Optional[PathLike] = None,
        fs_provider: Optional[FileSystemProvider] = None,
    ):
        self.src_dirs = list(src_dirs)
        self.root = root
        self.fs_provider = fs_provider
        self._aggregate = Aggregate()
        self._resolved: Dict[str, str] = {}

    def canonical_path(self, source_path: str) -> str:
        """Resolve a declared source path to the key used in the aggregate."""
        cached = self._resolved.get(source_path)
        if cached is not None:
            return cached

        found = find_src(normalize_path_separators(source_path), self.src_dirs, self.fs_provider)
        absolute = get_absolute_path(found, self.fs_provider)
        key = str(absolute)
        if self.root is not None:
            try:
                key = get_relative_path(absolute, self.root, self.fs_provider).as_posix()
            except ValueError:
                logger.debug(f"{absolute} is outside project root {self.root}")

        logger.debug(f"Source {source_path} resolved to {key}")
        self._resolved[source_path] = key
        return key

    def add(self, records: Iterable[CoverageRecord]) -> "Aggregator":
        for record in records:
            path = self.canonical_path(record.source_path)
            self._aggregate.summary_for(path).add_record(record)
        return self

    def result(self) -> Aggregate:
        return self._aggregate


def aggregate(
    records: Iterable[CoverageRecord],
    src_dirs: Sequence[PathLike] = (),
    root: Optional[PathLike] = None,
    fs_provider: Optional[FileSystemProvider] = None,
) -> Aggregate:
    """Fold ``records`` into a fresh ``Aggregate``."""
    return Aggregator(src_dirs, root, fs_provider).add(records).result()


def merge_all(aggregates: Iterable[Aggregate]) -> Aggregate:
    """Reduce partial aggregates (one per target) into one."""
    result = Aggregate()
    for partial in aggregates:
        result = result.merge(partial)
    return result


__all__ = ["Aggregator", "aggregate", "merge_all"]
