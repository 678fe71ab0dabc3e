"""
codecov.py - Codecov custom coverage JSON.

Shape of the document::

    {
      "coverage": {
        "src/Main.hs": {"10": 8, "11": "1/2", "12": 0}
      },
      "meta": {"files": 1, "generator": "hpcreport 0.1.0"}
    }

Lines map to their hit count. A line carrying boolean regions whose outcomes
were not all taken uses Codecov's partial notation, ``"<taken>/<total>"``,
counting two outcomes per boolean region. Uninstrumented lines are left out.
"""

import json
from typing import Any, Dict, Sequence, Union

from hpcreport import __version__
from hpcreport.core.models import Aggregate, BranchOutcome, FileSummary

LineValue = Union[int, str]


def line_value(hits: int, branches: Sequence[BranchOutcome]) -> LineValue:
    if branches:
        total = 2 * len(branches)
        taken = sum(outcome.outcomes_taken for outcome in branches)
        if taken < total:
            return f"{taken}/{total}"
    return hits


def file_coverage(summary: FileSummary) -> Dict[str, LineValue]:
    branches = summary.branches_by_line()
    return {
        str(line): line_value(hits, branches.get(line, ()))
        for line, hits in summary.sorted_lines()
    }


class CodecovJsonRenderer:
    """Renders the Codecov JSON report."""

    def __init__(self, indent: Union[int, None] = None):
        self.indent = indent

    def to_document(self, aggregate: Aggregate) -> Dict[str, Any]:
        files = aggregate.sorted_files()
        return {
            "coverage": {summary.path: file_coverage(summary) for summary in files},
            "meta": {"files": len(files), "generator": f"hpcreport {__version__}"},
        }

    def render(self, aggregate: Aggregate) -> bytes:
        text = json.dumps(self.to_document(aggregate), indent=self.indent, ensure_ascii=False)
        return (text + "\n").encode("utf-8")
