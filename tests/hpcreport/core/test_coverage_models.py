"""Tests for the coverage data model."""

import pytest

from hpcreport.core.models import (
    Aggregate,
    BoxLabel,
    BranchOutcome,
    BranchStatus,
    CondKind,
    CoverageRecord,
    FileSummary,
    Position,
    RegionKind,
)


def _record(position, kind, hits, cond=None):
    return CoverageRecord(
        module="Main",
        source_path="src/Main.hs",
        position=position,
        label=BoxLabel(kind, cond=cond),
        hits=hits,
    )


class TestPosition:

    def test_lines_inclusive(self):
        assert list(Position(5, 3, 7, 1).lines()) == [5, 6, 7]

    def test_show_form(self):
        assert str(Position(10, 1, 10, 20)) == "10:1-10:20"

    def test_ordering(self):
        assert Position(1, 9, 1, 10) < Position(2, 1, 2, 2)


class TestBranchOutcome:

    @pytest.mark.parametrize(
        "true_count,false_count,status,taken",
        [
            (0, 0, BranchStatus.UNCOVERED, 0),
            (3, 0, BranchStatus.PARTIAL, 1),
            (0, 1, BranchStatus.PARTIAL, 1),
            (2, 5, BranchStatus.FULL, 2),
        ],
    )
    def test_status(self, true_count, false_count, status, taken):
        outcome = BranchOutcome(true_count, false_count)
        assert outcome.status is status
        assert outcome.outcomes_taken == taken
        assert outcome.evaluated is (taken > 0)


class TestFileSummary:

    def test_multi_line_span_counts_each_line(self):
        summary = FileSummary("a.hs")
        summary.add_record(_record(Position(5, 1, 7, 3), RegionKind.EXPRESSION, 2))

        assert summary.sorted_lines() == [(5, 2), (6, 2), (7, 2)]

    def test_overlapping_regions_add_up(self):
        summary = FileSummary("a.hs")
        summary.add_record(_record(Position(10, 1, 10, 20), RegionKind.TOP_LEVEL, 3))
        summary.add_record(_record(Position(10, 5, 10, 9), RegionKind.EXPRESSION, 0))

        assert summary.lines == {10: 3}
        assert summary.lines_found == 1
        assert summary.lines_hit == 1

    def test_branch_sides_share_one_outcome(self):
        summary = FileSummary("a.hs")
        position = Position(11, 7, 11, 12)
        summary.add_record(_record(position, RegionKind.BOOL_TRUE, 4, CondKind.GUARD))
        summary.add_record(_record(position, RegionKind.BOOL_FALSE, 0, CondKind.GUARD))

        assert summary.branches == {(position, CondKind.GUARD): BranchOutcome(4, 0)}
        assert summary.branches_found == 2
        assert summary.branches_hit == 1
        assert summary.branches_by_line() == {11: [BranchOutcome(4, 0)]}

    def test_same_span_different_cond_kinds_are_distinct(self):
        summary = FileSummary("a.hs")
        position = Position(3, 1, 3, 4)
        summary.add_record(_record(position, RegionKind.BOOL_TRUE, 1, CondKind.GUARD))
        summary.add_record(_record(position, RegionKind.BOOL_TRUE, 1, CondKind.QUALIFIER))

        assert len(summary.branches) == 2
        assert [key[1] for key, _ in summary.sorted_branches()] == [CondKind.GUARD, CondKind.QUALIFIER]

    def test_merge_is_pure(self):
        left = FileSummary("a.hs", {1: 1}, {(Position(1, 1, 1, 2), CondKind.CONDITION): BranchOutcome(1, 0)})
        right = FileSummary("a.hs", {1: 2, 2: 0}, {(Position(1, 1, 1, 2), CondKind.CONDITION): BranchOutcome(0, 3)})

        merged = left.merge(right)

        assert merged.lines == {1: 3, 2: 0}
        assert merged.branches[(Position(1, 1, 1, 2), CondKind.CONDITION)] == BranchOutcome(1, 3)
        assert left.lines == {1: 1}
        assert left.branches[(Position(1, 1, 1, 2), CondKind.CONDITION)] == BranchOutcome(1, 0)


class TestAggregate:

    def test_files_without_lines_are_omitted(self):
        aggregate = Aggregate()
        aggregate.summary_for("b.hs").lines[1] = 0
        aggregate.summary_for("a.hs")

        assert [s.path for s in aggregate.sorted_files()] == ["b.hs"]
        assert len(aggregate) == 1

    def test_sorted_by_path(self):
        aggregate = Aggregate({
            "src/Z.hs": FileSummary("src/Z.hs", {1: 1}),
            "src/A.hs": FileSummary("src/A.hs", {1: 1}),
        })

        assert [s.path for s in aggregate.sorted_files()] == ["src/A.hs", "src/Z.hs"]

    def test_merge_does_not_mutate_inputs(self):
        left = Aggregate({"a.hs": FileSummary("a.hs", {1: 1})})
        right = Aggregate({"a.hs": FileSummary("a.hs", {1: 2}), "b.hs": FileSummary("b.hs", {4: 0})})

        merged = left.merge(right)

        assert merged.files["a.hs"].lines == {1: 3}
        assert merged.files["b.hs"].lines == {4: 0}
        assert left.files["a.hs"].lines == {1: 1}
        assert "b.hs" not in left.files
        assert merged.files["b.hs"] is not right.files["b.hs"]
