"""Business statistics recalculation for the Business Directory service.

The ``statistics`` block on a business is a materialized view over its
reviews and complaints. Every recomputation re-reads the full qualifying
set instead of applying a delta, so concurrent runs for the same business
converge on the value of whichever write lands last.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional

from business_directory.config import Settings
from business_directory.exceptions import DocumentStoreError
from business_directory.models.review import ReviewStatus
from business_directory.services.document_store import Collection, DocumentStore

logger = logging.getLogger(__name__)


@dataclass
class ReviewStats:
    average_rating: float
    total_reviews: int


@dataclass
class ComplaintStats:
    total_complaints: int


def calculate_review_stats(average: Optional[float], count: int, precision: int = 2) -> ReviewStats:
    """
    Build review statistics from an aggregated average and count.

    Args:
        average: Mean rating of the approved reviews (None when there are none)
        count: Number of approved reviews
        precision: Decimal places kept on the average

    Returns:
        ReviewStats, with an average of 0 when there are no reviews
    """
    if not count or average is None:
        return ReviewStats(average_rating=0.0, total_reviews=0)

    return ReviewStats(average_rating=round(average, precision), total_reviews=count)


class AggregateRecalculator:
    """Recomputes the derived statistics of a business from its related records."""

    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def recompute_review_stats(self, business_id: str) -> ReviewStats:
        """
        Recalculate average_rating and total_reviews from approved reviews.

        Raises:
            StoreUnavailable: The store could not be reached
            NotFound: The business document does not exist
        """
        result = await self.store.aggregate(
            Collection.REVIEWS,
            {"business_id": business_id, "status": ReviewStatus.APPROVED},
            {"avg_rating": {"avg": {"field": "rating"}}},
        )
        stats = calculate_review_stats(
            result.aggregations.get("avg_rating", {}).get("value"),
            result.total_count,
            precision=self.settings.rating_precision,
        )

        await self.store.update(
            Collection.BUSINESSES,
            business_id,
            {"statistics": asdict(stats)},
        )
        logger.info(
            f"Business {business_id} review stats: "
            f"average_rating={stats.average_rating} total_reviews={stats.total_reviews}"
        )
        return stats

    async def recompute_complaint_stats(self, business_id: str) -> ComplaintStats:
        """
        Recalculate total_complaints from publicly visible complaints.

        Raises:
            StoreUnavailable: The store could not be reached
            NotFound: The business document does not exist
        """
        result = await self.store.find(
            Collection.COMPLAINTS,
            {"business_id": business_id, "visible_to_public": True},
            size=0,
        )
        stats = ComplaintStats(total_complaints=result.total_count)

        await self.store.update(
            Collection.BUSINESSES,
            business_id,
            {"statistics": asdict(stats)},
        )
        logger.info(f"Business {business_id} complaint stats: total_complaints={stats.total_complaints}")
        return stats

    async def recompute_all(self, business_id: str) -> dict:
        """Recompute both review and complaint statistics for a business."""
        review_stats = await self.recompute_review_stats(business_id)
        complaint_stats = await self.recompute_complaint_stats(business_id)
        return {**asdict(review_stats), **asdict(complaint_stats)}

    async def recompute_many(self, business_ids: Iterable[str]) -> List[dict]:
        """
        Recompute statistics for several businesses.

        Useful for repairing statistics left stale by a failed trigger.
        Failures are reported per business instead of raised.

        Args:
            business_ids: Business IDs to recompute (duplicates are ignored)

        Returns:
            List of result dicts, one per unique business ID
        """
        results = []
        # Deduplicate, keeping first-seen order
        unique_ids = list(dict.fromkeys(business_ids))

        for business_id in unique_ids:
            try:
                stats = await self.recompute_all(business_id)
            except DocumentStoreError as e:
                logger.error(f"Statistics rebuild failed for business {business_id}: {e}")
                results.append({"success": False, "business_id": business_id, "error": str(e)})
            else:
                results.append({"success": True, "business_id": business_id, **stats})

        return results
