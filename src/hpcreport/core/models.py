"""Data models for parsed HPC artifacts and aggregated coverage."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Target:
    """A resolved unit of instrumentation: its tix file and where to look for the rest."""

    name: str
    tix_path: Path
    mix_dirs: Tuple[str, ...] = ()
    src_dirs: Tuple[str, ...] = ()


class RegionKind(str, Enum):
    """Semantic kind of an instrumented region."""

    TOP_LEVEL = "top_level"
    LOCAL = "local"
    ALTERNATIVE = "alternative"
    EXPRESSION = "expression"
    BOOL_TRUE = "bool_true"
    BOOL_FALSE = "bool_false"

    @property
    def is_branch(self) -> bool:
        return self in (RegionKind.BOOL_TRUE, RegionKind.BOOL_FALSE)


class CondKind(str, Enum):
    """Flavour of a boolean region: guard, if-condition or list-comprehension qualifier."""

    GUARD = "guard"
    CONDITION = "condition"
    QUALIFIER = "qualifier"


class BranchStatus(str, Enum):
    UNCOVERED = "uncovered"
    PARTIAL = "partial"
    FULL = "full"


@dataclass(frozen=True, order=True)
class Position:
    """Source span, 1-based and inclusive on both ends."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def lines(self) -> range:
        return range(self.start_line, self.end_line + 1)

    def __str__(self) -> str:
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class BoxLabel:
    """Kind of a region plus the details HPC records alongside it."""

    kind: RegionKind
    names: Tuple[str, ...] = ()
    cond: Optional[CondKind] = None


@dataclass(frozen=True)
class TixModule:
    name: str
    hash: int
    ticks: Tuple[int, ...]


@dataclass(frozen=True)
class Tix:
    """Contents of a tix file: modules in file order."""

    modules: Tuple[TixModule, ...]

    def __iter__(self) -> Iterator[TixModule]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)


@dataclass(frozen=True)
class MixEntry:
    position: Position
    label: BoxLabel


@dataclass(frozen=True)
class MixFile:
    """Contents of a mix file; ``entries`` are index-aligned with the module's ticks."""

    source_path: str
    timestamp: str
    hash: int
    tabstop: int
    entries: Tuple[MixEntry, ...]


@dataclass(frozen=True)
class CoverageRecord:
    """One tick count paired with the region it counts."""

    module: str
    source_path: str
    position: Position
    label: BoxLabel
    hits: int


@dataclass
class BranchOutcome:
    true_count: int = 0
    false_count: int = 0

    @property
    def status(self) -> BranchStatus:
        taken = (self.true_count > 0) + (self.false_count > 0)
        if taken == 2:
            return BranchStatus.FULL
        if taken == 1:
            return BranchStatus.PARTIAL
        return BranchStatus.UNCOVERED

    @property
    def evaluated(self) -> bool:
        return self.true_count > 0 or self.false_count > 0

    @property
    def outcomes_taken(self) -> int:
        return (self.true_count > 0) + (self.false_count > 0)


BranchKey = Tuple[Position, Optional[CondKind]]


def _branch_sort_key(key: BranchKey) -> Tuple[Position, str]:
    position, cond = key
    return position, cond.value if cond is not None else ""


@dataclass
class FileSummary:
    """Per-line hit counts and per-branch outcomes of one source file."""

    path: str
    lines: Dict[int, int] = field(default_factory=dict)
    branches: Dict[BranchKey, BranchOutcome] = field(default_factory=dict)

    def add_record(self, record: CoverageRecord) -> None:
        for line in record.position.lines():
            self.lines[line] = self.lines.get(line, 0) + record.hits

        if record.label.kind.is_branch:
            outcome = self.branches.setdefault(
                (record.position, record.label.cond), BranchOutcome()
            )
            if record.label.kind is RegionKind.BOOL_TRUE:
                outcome.true_count += record.hits
            else:
                outcome.false_count += record.hits

    def merge(self, other: "FileSummary") -> "FileSummary":
        """Return a new summary with counts of both added together."""
        merged = self.copy()
        for line, hits in other.lines.items():
            merged.lines[line] = merged.lines.get(line, 0) + hits
        for key, outcome in other.branches.items():
            mine = merged.branches.setdefault(key, BranchOutcome())
            mine.true_count += outcome.true_count
            mine.false_count += outcome.false_count
        return merged

    def copy(self) -> "FileSummary":
        return FileSummary(
            path=self.path,
            lines=dict(self.lines),
            branches={
                key: BranchOutcome(o.true_count, o.false_count)
                for key, o in self.branches.items()
            },
        )

    def sorted_lines(self) -> List[Tuple[int, int]]:
        return sorted(self.lines.items())

    def sorted_branches(self) -> List[Tuple[BranchKey, BranchOutcome]]:
        return sorted(self.branches.items(), key=lambda item: _branch_sort_key(item[0]))

    def branches_by_line(self) -> Dict[int, List[BranchOutcome]]:
        """Branch outcomes grouped by the line their condition starts on."""
        grouped: Dict[int, List[BranchOutcome]] = {}
        for (position, _), outcome in self.sorted_branches():
            grouped.setdefault(position.start_line, []).append(outcome)
        return grouped

    @property
    def lines_found(self) -> int:
        return len(self.lines)

    @property
    def lines_hit(self) -> int:
        return sum(1 for hits in self.lines.values() if hits > 0)

    @property
    def branches_found(self) -> int:
        return 2 * len(self.branches)

    @property
    def branches_hit(self) -> int:
        return sum(o.outcomes_taken for o in self.branches.values())


@dataclass
class Aggregate:
    """Coverage of every source file, keyed by resolved path."""

    files: Dict[str, FileSummary] = field(default_factory=dict)

    def summary_for(self, path: str) -> FileSummary:
        summary = self.files.get(path)
        if summary is None:
            summary = self.files[path] = FileSummary(path=path)
        return summary

    def merge(self, other: "Aggregate") -> "Aggregate":
        """Return a new aggregate combining both; neither input is modified."""
        merged = Aggregate({path: s.copy() for path, s in self.files.items()})
        for path, summary in other.files.items():
            mine = merged.files.get(path)
            merged.files[path] = summary.copy() if mine is None else mine.merge(summary)
        return merged

    def sorted_files(self) -> List[FileSummary]:
        """Summaries with at least one instrumented line, ordered by path."""
        return [self.files[path] for path in sorted(self.files) if self.files[path].lines]

    def __len__(self) -> int:
        return len(self.sorted_files())


__all__ = [
    "Target",
    "RegionKind",
    "CondKind",
    "BranchStatus",
    "Position",
    "BoxLabel",
    "TixModule",
    "Tix",
    "MixEntry",
    "MixFile",
    "CoverageRecord",
    "BranchOutcome",
    "BranchKey",
    "FileSummary",
    "Aggregate",
]
