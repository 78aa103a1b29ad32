"""Unit tests for business statistics recalculation.

Tests cover:
    - calculate_review_stats: rounding and the empty case
    - AggregateRecalculator.recompute_review_stats: approved-only aggregation
    - AggregateRecalculator.recompute_complaint_stats: visible-only counting
    - recompute_many: deduplication and per-business failures
"""
import pytest
from unittest.mock import AsyncMock

from business_directory.config import Settings
from business_directory.exceptions import NotFound, StoreUnavailable
from business_directory.services.business_stats import (
    AggregateRecalculator,
    ReviewStats,
    calculate_review_stats,
)
from business_directory.services.document_store import AggregateResult
from tests.conftest import InMemoryDocumentStore


class TestCalculateReviewStats:
    """Tests for calculate_review_stats."""

    def test_no_reviews_average_zero(self):
        assert calculate_review_stats(None, 0) == ReviewStats(average_rating=0.0, total_reviews=0)

    def test_keeps_average_and_count(self):
        assert calculate_review_stats(4.0, 3) == ReviewStats(average_rating=4.0, total_reviews=3)

    def test_rounds_to_precision(self):
        stats = calculate_review_stats(13 / 3, 3, precision=2)
        assert stats.average_rating == 4.33

    def test_rounds_to_configured_precision(self):
        assert calculate_review_stats(3.25, 4, precision=1).average_rating == 3.2


class TestRecomputeReviewStats:
    """Tests for recompute_review_stats against the in-memory store."""

    @pytest.mark.asyncio
    async def test_scenario_three_approved_reviews(self, store, settings):
        """Ratings [5, 3, 4], all approved, average to 4.0."""
        store.add_business("biz_x")
        for i, rating in enumerate([5, 3, 4]):
            store.add_review(f"rev_{i}", "biz_x", rating)

        stats = await AggregateRecalculator(store, settings).recompute_review_stats("biz_x")

        assert stats == ReviewStats(average_rating=4.0, total_reviews=3)
        assert store.statistics("biz_x")["average_rating"] == 4.0
        assert store.statistics("biz_x")["total_reviews"] == 3

    @pytest.mark.asyncio
    async def test_ignores_unapproved_and_other_businesses(self, store, settings):
        store.add_business("biz_x")
        store.add_business("biz_other")
        store.add_review("rev_1", "biz_x", 5)
        store.add_review("rev_2", "biz_x", 1, status="pending")
        store.add_review("rev_3", "biz_x", 1, status="rejected")
        store.add_review("rev_4", "biz_x", 1, status="flagged")
        store.add_review("rev_5", "biz_other", 1)

        stats = await AggregateRecalculator(store, settings).recompute_review_stats("biz_x")

        assert stats == ReviewStats(average_rating=5.0, total_reviews=1)

    @pytest.mark.asyncio
    async def test_no_approved_reviews_writes_zero(self, store, settings):
        """A business without approved reviews gets 0 / 0, not a division error."""
        store.add_business("biz_x", statistics={
            "average_rating": 3.5, "total_reviews": 2, "total_complaints": 0, "view_count": 0,
        })
        store.add_review("rev_1", "biz_x", 4, status="pending")

        stats = await AggregateRecalculator(store, settings).recompute_review_stats("biz_x")

        assert stats == ReviewStats(average_rating=0.0, total_reviews=0)
        assert store.statistics("biz_x")["average_rating"] == 0.0
        assert store.statistics("biz_x")["total_reviews"] == 0

    @pytest.mark.asyncio
    async def test_idempotent(self, store, settings):
        store.add_business("biz_x")
        for i, rating in enumerate([2, 5, 5]):
            store.add_review(f"rev_{i}", "biz_x", rating)
        recalculator = AggregateRecalculator(store, settings)

        first = await recalculator.recompute_review_stats("biz_x")
        snapshot = dict(store.statistics("biz_x"))
        second = await recalculator.recompute_review_stats("biz_x")

        assert first == second
        assert store.statistics("biz_x") == snapshot

    @pytest.mark.asyncio
    async def test_single_partial_update_leaves_other_fields(self, store, settings):
        store.add_business("biz_x", statistics={
            "average_rating": 0.0, "total_reviews": 0, "total_complaints": 7, "view_count": 42,
        })
        store.add_review("rev_1", "biz_x", 3)

        await AggregateRecalculator(store, settings).recompute_review_stats("biz_x")

        assert store.update_calls == [
            ("businesses", "biz_x", {"statistics": {"average_rating": 3.0, "total_reviews": 1}}),
        ]
        assert store.statistics("biz_x")["total_complaints"] == 7
        assert store.statistics("biz_x")["view_count"] == 42

    @pytest.mark.asyncio
    async def test_average_covers_reviews_beyond_one_page(self):
        """The average and the count both cover every approved review, however many there are."""
        settings = Settings(max_related_documents=3)
        store = InMemoryDocumentStore(max_related_documents=3)
        store.add_business("biz_x")
        for i, rating in enumerate([5, 5, 5, 1, 1, 1]):
            store.add_review(f"rev_{i}", "biz_x", rating)

        stats = await AggregateRecalculator(store, settings).recompute_review_stats("biz_x")

        assert stats == ReviewStats(average_rating=3.0, total_reviews=6)

    @pytest.mark.asyncio
    async def test_uses_store_side_average(self, settings):
        mock_store = AsyncMock()
        mock_store.aggregate.return_value = AggregateResult(
            total_count=6,
            aggregations={"avg_rating": {"value": 3.0}},
        )

        stats = await AggregateRecalculator(mock_store, settings).recompute_review_stats("biz_x")

        assert stats == ReviewStats(average_rating=3.0, total_reviews=6)
        collection, filters, aggregations = mock_store.aggregate.call_args.args
        assert filters["business_id"] == "biz_x"
        assert aggregations == {"avg_rating": {"avg": {"field": "rating"}}}
        mock_store.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_business_raises_not_found(self, store, settings):
        store.add_review("rev_1", "biz_gone", 5)

        with pytest.raises(NotFound):
            await AggregateRecalculator(store, settings).recompute_review_stats("biz_gone")

    @pytest.mark.asyncio
    async def test_store_unavailable_propagates(self, store, settings):
        store.add_business("biz_x")
        store.fail_with = StoreUnavailable("connection refused")

        with pytest.raises(StoreUnavailable):
            await AggregateRecalculator(store, settings).recompute_review_stats("biz_x")


class TestRecomputeComplaintStats:
    """Tests for recompute_complaint_stats."""

    @pytest.mark.asyncio
    async def test_counts_only_visible_complaints(self, store, settings):
        """Three complaints, two visible, gives a total of 2."""
        store.add_business("biz_y")
        store.add_complaint("cmp_1", "biz_y", visible_to_public=True)
        store.add_complaint("cmp_2", "biz_y", visible_to_public=True, status="resolved")
        store.add_complaint("cmp_3", "biz_y", visible_to_public=False)

        stats = await AggregateRecalculator(store, settings).recompute_complaint_stats("biz_y")

        assert stats.total_complaints == 2
        assert store.statistics("biz_y")["total_complaints"] == 2

    @pytest.mark.asyncio
    async def test_status_does_not_matter(self, store, settings):
        store.add_business("biz_y")
        for i, status in enumerate(["submitted", "rejected", "closed", "resolved"]):
            store.add_complaint(f"cmp_{i}", "biz_y", status=status)

        stats = await AggregateRecalculator(store, settings).recompute_complaint_stats("biz_y")

        assert stats.total_complaints == 4

    @pytest.mark.asyncio
    async def test_writes_only_complaint_total(self, store, settings):
        store.add_business("biz_y")

        await AggregateRecalculator(store, settings).recompute_complaint_stats("biz_y")

        assert store.update_calls == [("businesses", "biz_y", {"statistics": {"total_complaints": 0}})]


class TestRecomputeMany:
    """Tests for recompute_many."""

    @pytest.mark.asyncio
    async def test_deduplicates_and_reports_failures(self, store, settings):
        store.add_business("biz_a")
        store.add_review("rev_1", "biz_a", 4)
        store.add_complaint("cmp_1", "biz_a")

        results = await AggregateRecalculator(store, settings).recompute_many(["biz_a", "biz_missing", "biz_a"])

        assert [r["business_id"] for r in results] == ["biz_a", "biz_missing"]
        assert results[0] == {
            "success": True,
            "business_id": "biz_a",
            "average_rating": 4.0,
            "total_reviews": 1,
            "total_complaints": 1,
        }
        assert results[1]["success"] is False
        assert "biz_missing" in results[1]["error"]
