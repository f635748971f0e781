"""Property-based tests for problem pagination.

Verifies the guarantees of ``paginate``:
- Page size: ``shown`` is the overlap of ``[offset, offset + limit)`` with the records
- Continuation: ``has_more`` iff ``offset + shown < total``, and ``next_offset``
  is ``offset + limit`` exactly when ``has_more``
- Coverage: following ``next_offset`` from 0 visits every record once, in order
"""
from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from inspectlens.core.filtering import paginate
from inspectlens.core.problems import ProblemRecord, Severity


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def record_lists(max_size: int = 60) -> st.SearchStrategy[list[ProblemRecord]]:
    """Lists of distinct records (distinct by line)."""
    return st.integers(min_value=0, max_value=max_size).map(
        lambda n: [
            ProblemRecord(f"problem {i}", "/p/a.py", i + 1, 0, Severity.WARNING)
            for i in range(n)
        ]
    )


limits = st.integers(min_value=-5, max_value=80)
offsets = st.integers(min_value=-5, max_value=100)


# ---------------------------------------------------------------------------
# Page shape
# ---------------------------------------------------------------------------


class TestPageShape:
    """Size and continuation fields of a single page."""

    @given(records=record_lists(), limit=limits, offset=offsets)
    def test_shown_is_window_overlap(self, records, limit: int, offset: int) -> None:
        page = paginate(records, limit, offset)
        lo, size = max(0, offset), max(0, limit)
        assert page.shown == max(0, min(size, len(records) - lo))
        assert page.shown == len(page.problems)
        assert page.total == len(records)

    @given(records=record_lists(), limit=limits, offset=offsets)
    def test_continuation_fields(self, records, limit: int, offset: int) -> None:
        page = paginate(records, limit, offset)
        assert page.has_more == (page.offset + page.shown < page.total)
        if page.has_more:
            assert page.next_offset == page.offset + page.limit
        else:
            assert page.next_offset is None

    @given(records=record_lists(), limit=limits, offset=offsets)
    def test_page_is_contiguous_slice(self, records, limit: int, offset: int) -> None:
        page = paginate(records, limit, offset)
        assert list(page.problems) == records[page.offset:page.offset + page.shown]


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------


class TestCoverage:
    """Walking pages visits every record exactly once."""

    @given(records=record_lists(), limit=st.integers(min_value=1, max_value=25))
    def test_walk_visits_all_in_order(self, records, limit: int) -> None:
        seen: list[ProblemRecord] = []
        offset: int | None = 0
        while offset is not None:
            page = paginate(records, limit, offset)
            seen.extend(page.problems)
            offset = page.next_offset
        assert seen == records
