"""Core coverage model: correlation of ticks with regions and aggregation per file."""

from .aggregate import Aggregator, aggregate, merge_all
from .correlate import correlate, correlate_module
from .models import (
    Aggregate,
    BoxLabel,
    BranchOutcome,
    BranchStatus,
    CondKind,
    CoverageRecord,
    FileSummary,
    MixEntry,
    MixFile,
    Position,
    RegionKind,
    Target,
    Tix,
    TixModule,
)

__all__ = [
    "Aggregator",
    "aggregate",
    "merge_all",
    "correlate",
    "correlate_module",
    "Aggregate",
    "BoxLabel",
    "BranchOutcome",
    "BranchStatus",
    "CondKind",
    "CoverageRecord",
    "FileSummary",
    "MixEntry",
    "MixFile",
    "Position",
    "RegionKind",
    "Target",
    "Tix",
    "TixModule",
]
