"""Services for the Business Directory service."""

from business_directory.services.business_stats import (
    AggregateRecalculator,
    ComplaintStats,
    ReviewStats,
    calculate_review_stats,
)
from business_directory.services.change_notifier import (
    ChangeNotifier,
    ChangeOperation,
    RecomputeOutcome,
    complaint_triggers_recompute,
    review_triggers_recompute,
)
from business_directory.services.document_store import AggregateResult, Collection, DocumentStore, FindResult
from business_directory.services.view_counter import increment_view_count

__all__ = [
    "AggregateRecalculator",
    "AggregateResult",
    "ChangeNotifier",
    "ChangeOperation",
    "Collection",
    "ComplaintStats",
    "DocumentStore",
    "FindResult",
    "RecomputeOutcome",
    "ReviewStats",
    "calculate_review_stats",
    "complaint_triggers_recompute",
    "increment_view_count",
    "review_triggers_recompute",
]
