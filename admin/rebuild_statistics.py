#!/usr/bin/env python3
"""
Rebuild business statistics from reviews and complaints.

Recomputes average_rating, total_reviews and total_complaints for the
given businesses, or for every business when none are named. Use this to
repair statistics left stale by a failed recomputation or by reviews that
were moved out of the approved state.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Allow running as script or module
if __name__ == "__main__" and __package__ is None:
    sys.path.insert(0, str(Path(__file__).parent.parent))

import click
from tqdm import tqdm

from admin.utils.cli import (
    common_options,
    echo_error,
    echo_info,
    echo_success,
    echo_verbose,
    elasticsearch_options,
    env_option,
    load_settings,
)
from admin.utils.elasticsearch import get_async_es_client
from business_directory.config import Settings
from business_directory.exceptions import DocumentStoreError
from business_directory.services.business_stats import AggregateRecalculator
from business_directory.services.document_store import Collection, DocumentStore


async def rebuild(
    settings: Settings,
    business_ids: List[str],
    dry_run: bool = False,
    verbose: bool = False,
    store: Optional[DocumentStore] = None,
) -> List[dict]:
    """
    Recompute statistics for the named businesses, or all of them.

    Args:
        settings: Application settings
        business_ids: Businesses to rebuild; empty means every business
        dry_run: Only list the businesses that would be rebuilt
        verbose: Print per-business results
        store: Document store to use (a new client is opened when omitted)

    Returns:
        One result dict per business rebuilt
    """
    es = None
    if store is None:
        es = get_async_es_client(settings)
        store = DocumentStore(es, settings)

    try:
        if not business_ids:
            business_ids = [business_id async for business_id in store.scan_ids(Collection.BUSINESSES)]

        echo_info(f"Rebuilding statistics for {len(business_ids)} business(es)")
        if dry_run:
            for business_id in business_ids:
                echo_info(f"[DRY RUN] Would rebuild: {business_id}")
            return []

        recalculator = AggregateRecalculator(store, settings)
        results = []
        for business_id in tqdm(business_ids, desc="Businesses", unit="biz", disable=verbose):
            batch = await recalculator.recompute_many([business_id])
            results.extend(batch)
            for entry in batch:
                echo_verbose(f"{business_id}: {entry}", verbose)
        return results
    finally:
        if es is not None:
            await es.close()


@click.command()
@click.option(
    "--business-id", "-b",
    multiple=True,
    help="Business to rebuild (repeatable). Defaults to every business."
)
@common_options
@elasticsearch_options
@env_option
def main(business_id: tuple, dry_run: bool, verbose: bool, config: str):
    """
    Recompute denormalized business statistics.

    Examples:

        # Rebuild every business
        python -m admin.rebuild_statistics

        # Rebuild two businesses with per-business output
        python -m admin.rebuild_statistics -b biz_1 -b biz_2 -v
    """
    settings = load_settings(config)

    try:
        results = asyncio.run(rebuild(settings, list(business_id), dry_run=dry_run, verbose=verbose))
    except DocumentStoreError as e:
        echo_error(f"Rebuild failed: {e}")
        raise SystemExit(1)

    failed = [r for r in results if not r["success"]]
    for entry in failed:
        echo_error(f"{entry['business_id']}: {entry['error']}")

    echo_success(f"Rebuilt {len(results) - len(failed)} business(es), {len(failed)} failed")
    if failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
