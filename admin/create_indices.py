#!/usr/bin/env python3
"""
Create Elasticsearch indices for the Business Directory.

Reads mapping definitions from the mappings/ directory and creates the
configured index for each collection (businesses, reviews, complaints).
"""

import json
import sys
from pathlib import Path

# Allow running as script or module
if __name__ == "__main__" and __package__ is None:
    sys.path.insert(0, str(Path(__file__).parent.parent))

import click

from admin.utils.cli import (
    common_options,
    confirm_action,
    echo_error,
    echo_info,
    echo_success,
    echo_verbose,
    echo_warning,
    elasticsearch_options,
    env_option,
    load_settings,
)
from admin.utils.elasticsearch import get_es_client


# Default mappings directory relative to project root
DEFAULT_MAPPINGS_DIR = Path(__file__).parent.parent / "mappings"


def load_mapping(mapping_path: Path) -> dict:
    """Load a mapping definition (settings and mappings) from a JSON file."""
    with open(mapping_path, "r") as f:
        return json.load(f)


def create_index(es, index_name: str, mapping: dict, dry_run: bool = False, verbose: bool = False) -> bool:
    """
    Create an Elasticsearch index with the given mapping.

    Returns:
        bool: True if successful, False otherwise
    """
    if dry_run:
        echo_info(f"[DRY RUN] Would create index: {index_name}")
        echo_verbose(f"Mapping: {json.dumps(mapping, indent=2)}", verbose)
        return True

    try:
        es.indices.create(
            index=index_name,
            settings=mapping.get("settings", {}),
            mappings=mapping.get("mappings", {})
        )
    except Exception as e:
        echo_error(f"Failed to create index {index_name}: {e}")
        return False

    echo_success(f"Created index: {index_name}")
    return True


def delete_index(es, index_name: str, dry_run: bool = False) -> bool:
    """Delete an Elasticsearch index."""
    if dry_run:
        echo_info(f"[DRY RUN] Would delete index: {index_name}")
        return True

    try:
        es.indices.delete(index=index_name)
    except Exception as e:
        echo_error(f"Failed to delete index {index_name}: {e}")
        return False

    echo_success(f"Deleted index: {index_name}")
    return True


@click.command()
@click.option(
    "--mappings-dir", "-m",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=DEFAULT_MAPPINGS_DIR,
    help="Directory containing <collection>.json mapping files."
)
@click.option(
    "--collection", "-i",
    multiple=True,
    type=click.Choice(["businesses", "reviews", "complaints"]),
    help="Collection to create (repeatable). Defaults to all collections."
)
@click.option(
    "--delete-existing",
    is_flag=True,
    default=False,
    help="Delete existing indices before creating new ones."
)
@click.option(
    "--force", "-f",
    is_flag=True,
    default=False,
    help="Skip confirmation prompts."
)
@common_options
@elasticsearch_options
@env_option
def main(
    mappings_dir: Path,
    collection: tuple,
    delete_existing: bool,
    force: bool,
    dry_run: bool,
    verbose: bool,
    config: str
):
    """
    Create the directory's Elasticsearch indices from mapping definitions.

    Index names come from the configuration, so the same mappings serve
    every environment.

    Examples:

        # Create all indices
        python -m admin.create_indices

        # Recreate only the reviews index
        python -m admin.create_indices -i reviews --delete-existing
    """
    settings = load_settings(config)
    indices = settings.collection_indices
    collections = list(collection) or list(indices)

    try:
        es = get_es_client(settings)
        es.info()
        echo_verbose("Connected to Elasticsearch", verbose)
    except Exception as e:
        echo_error(f"Failed to connect to Elasticsearch: {e}")
        raise SystemExit(1)

    existing = [name for name in collections if es.indices.exists(index=indices[name])]

    if existing and not delete_existing:
        echo_warning(f"The following indices already exist: {', '.join(indices[n] for n in existing)}")
        echo_info("Use --delete-existing to recreate them, or they will be skipped.")

    if delete_existing and existing:
        if not dry_run and not force:
            if not confirm_action(
                f"Delete {len(existing)} existing indices? This cannot be undone.",
                default=False,
                abort=False
            ):
                echo_info("Aborted.")
                raise SystemExit(0)

        for name in existing:
            delete_index(es, indices[name], dry_run=dry_run)

    success_count = 0
    skip_count = 0
    fail_count = 0

    for name in collections:
        index_name = indices[name]

        if name in existing and not delete_existing:
            echo_info(f"Skipping existing index: {index_name}")
            skip_count += 1
            continue

        mapping_file = mappings_dir / f"{name}.json"
        try:
            mapping = load_mapping(mapping_file)
            echo_verbose(f"Loaded mapping from {mapping_file}", verbose)
        except (OSError, json.JSONDecodeError) as e:
            echo_error(f"Failed to load mapping from {mapping_file}: {e}")
            fail_count += 1
            continue

        if create_index(es, index_name, mapping, dry_run=dry_run, verbose=verbose):
            success_count += 1
        else:
            fail_count += 1

    echo_info(f"\nSummary: {success_count} created, {skip_count} skipped, {fail_count} failed")

    if fail_count > 0:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
