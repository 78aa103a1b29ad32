"""Change notifications that keep business statistics in step with reviews and complaints.

The notifier is called after a review or complaint write has been committed.
It decides whether the write should trigger a recomputation and runs it,
logging and dropping any failure so the submission itself is never affected.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from business_directory.config import Settings
from business_directory.exceptions import DocumentStoreError, NotFound, StoreUnavailable
from business_directory.models.complaint import Complaint
from business_directory.models.review import Review, ReviewStatus
from business_directory.services.business_stats import AggregateRecalculator

logger = logging.getLogger(__name__)


class ChangeOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class EntityKind(str, Enum):
    REVIEW = "review"
    COMPLAINT = "complaint"


@dataclass
class RecomputeOutcome:
    """What a change notification did."""

    kind: EntityKind
    business_id: str
    triggered: bool
    succeeded: bool = False
    error: Optional[str] = None


def review_triggers_recompute(
    previous: Optional[Review],
    new: Review,
    recompute_on_exit: bool = False,
) -> bool:
    """
    Decide whether a review write should recompute rating statistics.

    Fires when the review moves into the approved state. Edits to an
    already-approved review do not fire. A review leaving the approved
    state only fires when ``recompute_on_exit`` is set; otherwise the
    business keeps counting it until the next approval.
    """
    was_approved = previous is not None and previous.status == ReviewStatus.APPROVED
    is_approved = new.status == ReviewStatus.APPROVED

    if is_approved and not was_approved:
        return True
    return recompute_on_exit and was_approved and not is_approved


def complaint_triggers_recompute(
    previous: Optional[Complaint],
    new: Complaint,
    operation: ChangeOperation,
) -> bool:
    """
    Decide whether a complaint write should recompute the complaint count.

    Fires on every create, and on updates that change the status of a
    publicly visible complaint.
    """
    if operation == ChangeOperation.CREATE:
        return True
    previous_status = previous.status if previous is not None else None
    return new.status != previous_status and new.visible_to_public


class ChangeNotifier:
    """Dispatches statistics recomputation for review and complaint changes."""

    def __init__(self, recalculator: AggregateRecalculator, settings: Settings):
        self.recalculator = recalculator
        self.settings = settings

    async def on_review_change(
        self,
        previous: Optional[Review],
        new: Review,
        operation: ChangeOperation,
    ) -> RecomputeOutcome:
        triggered = review_triggers_recompute(
            previous,
            new,
            recompute_on_exit=self.settings.recompute_on_review_exit,
        )
        outcome = RecomputeOutcome(EntityKind.REVIEW, new.business_id, triggered)
        if not triggered:
            logger.debug(f"Review {new.review_id} {operation.value}: no statistics change")
            return outcome

        return await self._run(outcome, self.recalculator.recompute_review_stats)

    async def on_complaint_change(
        self,
        previous: Optional[Complaint],
        new: Complaint,
        operation: ChangeOperation,
    ) -> RecomputeOutcome:
        triggered = complaint_triggers_recompute(previous, new, operation)
        outcome = RecomputeOutcome(EntityKind.COMPLAINT, new.business_id, triggered)
        if not triggered:
            logger.debug(f"Complaint {new.complaint_id} {operation.value}: no statistics change")
            return outcome

        return await self._run(outcome, self.recalculator.recompute_complaint_stats)

    async def on_change(
        self,
        previous: Optional[Union[Review, Complaint]],
        new: Union[Review, Complaint],
        operation: ChangeOperation,
    ) -> RecomputeOutcome:
        """Route a change to the review or complaint handler by record type."""
        if isinstance(new, Review):
            return await self.on_review_change(previous, new, operation)
        if isinstance(new, Complaint):
            return await self.on_complaint_change(previous, new, operation)
        raise TypeError(f"Unsupported record type: {type(new).__name__}")

    async def _run(self, outcome: RecomputeOutcome, recompute) -> RecomputeOutcome:
        try:
            await recompute(outcome.business_id)
        except StoreUnavailable as e:
            # Stats stay stale until the next qualifying change
            logger.error(
                f"Could not recompute {outcome.kind.value} statistics for business "
                f"{outcome.business_id}: {e}"
            )
            outcome.error = str(e)
        except NotFound as e:
            logger.warning(
                f"Dropping {outcome.kind.value} statistics update, business "
                f"{outcome.business_id} no longer exists: {e}"
            )
            outcome.error = str(e)
        except DocumentStoreError as e:
            logger.error(
                f"Store rejected {outcome.kind.value} statistics update for business "
                f"{outcome.business_id}: {e}"
            )
            outcome.error = str(e)
        else:
            outcome.succeeded = True

        return outcome
