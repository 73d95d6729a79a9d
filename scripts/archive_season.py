"""
Archive script copying a tournament snapshot to a season key.

Usage:
    python scripts/archive_season.py SOURCE_ID SEASON_ID [--reset-source] [--force]
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import TYPE_CHECKING

import firebase_admin
from firebase_admin import credentials, firestore

from sinuca.bracket.engine import BracketEngine
from sinuca.sync.gateway import SyncGateway

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def initialize_app() -> firebase_admin.App:
    """Initializes Firebase from FIREBASE_KEY_PATH or default credentials."""
    key_path = os.environ.get("FIREBASE_KEY_PATH")
    cred = (
        credentials.Certificate(key_path)
        if key_path
        else credentials.ApplicationDefault()
    )
    return firebase_admin.initialize_app(cred)


def archive_season(
    db: Client,
    source_id: str,
    season_id: str,
    reset_source: bool = False,
    force: bool = False,
) -> int:
    """Copy the source snapshot under the season key.

    Returns the number of entries archived.
    """
    if source_id == season_id:
        raise ValueError("Source and season must be different keys.")

    gateway = SyncGateway(db)
    if gateway.exists(season_id) and not force:
        raise ValueError(
            f"Season '{season_id}' already exists. Use --force to overwrite it."
        )

    snapshot = gateway.load(source_id)
    archived = dict(snapshot)
    archived["id"] = season_id
    gateway.overwrite(archived)  # type: ignore[arg-type]
    print(
        f"Archived '{source_id}' as '{season_id}': {len(snapshot['participants'])} "
        f"participants, {len(snapshot['entries'])} entries, "
        f"{len(snapshot['matches'])} matches."
    )

    if reset_source:
        result = BracketEngine.reset_tournament(snapshot)
        gateway.save(result.snapshot, expected_revision=snapshot["revision"])
        print(f"Reset '{source_id}' for the next season (event log kept).")

    return len(snapshot["entries"])


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Copy a tournament snapshot to a season key."
    )
    parser.add_argument("source_id", help="Tournament key to archive, e.g. 'main'.")
    parser.add_argument("season_id", help="Key to store the copy under, e.g. '2025'.")
    parser.add_argument(
        "--reset-source",
        action="store_true",
        help="Reset the source tournament after copying it.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing season document.",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Main entry point for the archive script."""
    args = parse_args()
    try:
        app = initialize_app()
        db = firestore.client(app=app)
        archive_season(db, args.source_id, args.season_id, args.reset_source, args.force)
    except Exception as e:
        print(f"\nAn error occurred during archiving: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
