"""Profile view counting for the Business Directory service."""

import logging
from typing import Optional

from business_directory.services.document_store import Collection, DocumentStore

logger = logging.getLogger(__name__)


async def increment_view_count(store: DocumentStore, business_id: str) -> Optional[int]:
    """
    Add one public view to a business's statistics.

    Reads the current count and writes it back incremented. This runs
    after the read it annotates has already been answered, so any failure
    is logged and swallowed.

    Args:
        store: Document store
        business_id: The business that was viewed

    Returns:
        The new view count, or None if the increment failed
    """
    try:
        business = await store.get(Collection.BUSINESSES, business_id)
        current = int((business.get("statistics") or {}).get("view_count") or 0)
        view_count = current + 1

        await store.update(
            Collection.BUSINESSES,
            business_id,
            {"statistics": {"view_count": view_count}},
        )
        return view_count

    except Exception as e:
        logger.warning(f"Could not record view for business {business_id}: {e}")
        return None
