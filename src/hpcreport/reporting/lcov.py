"""
lcov.py - LCOV tracefile output.

Per source file::

    SF:<path>
    DA:<line>,<hits>             one per instrumented line, ascending
    BRDA:<line>,<block>,<branch>,<taken>
    LF:<lines found>
    LH:<lines hit>
    BRF:<branches found>
    BRH:<branches hit>
    end_of_record

Each boolean region is one block with two branches: 0 is the true outcome and
1 the false outcome. When neither outcome was ever taken the condition was
never evaluated, and both are written as ``-`` rather than ``0``.
"""

from typing import Iterator, List

from hpcreport.core.models import Aggregate, BranchOutcome, FileSummary

NOT_EXECUTED = "-"


def _taken(count: int, outcome: BranchOutcome) -> str:
    return str(count) if outcome.evaluated else NOT_EXECUTED


def file_record(summary: FileSummary) -> Iterator[str]:
    yield f"SF:{summary.path}"
    for line, hits in summary.sorted_lines():
        yield f"DA:{line},{hits}"
    for block, ((position, _), outcome) in enumerate(summary.sorted_branches()):
        yield f"BRDA:{position.start_line},{block},0,{_taken(outcome.true_count, outcome)}"
        yield f"BRDA:{position.start_line},{block},1,{_taken(outcome.false_count, outcome)}"
    yield f"LF:{summary.lines_found}"
    yield f"LH:{summary.lines_hit}"
    yield f"BRF:{summary.branches_found}"
    yield f"BRH:{summary.branches_hit}"
    yield "end_of_record"


class LcovRenderer:
    """Renders an LCOV tracefile."""

    def lines(self, aggregate: Aggregate) -> List[str]:
        out: List[str] = []
        for summary in aggregate.sorted_files():
            out.extend(file_record(summary))
        return out

    def render(self, aggregate: Aggregate) -> bytes:
        return "".join(line + "\n" for line in self.lines(aggregate)).encode("utf-8")
