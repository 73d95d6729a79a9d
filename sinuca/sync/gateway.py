"""Firestore persistence of the tournament snapshot."""

from __future__ import annotations

import datetime
import hashlib
import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from sinuca.bracket.models import TournamentSnapshot, empty_snapshot
from sinuca.constants import TOURNAMENTS_COLLECTION
from sinuca.errors import ConflictError, SyncError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction
    from google.cloud.firestore_v1.watch import Watch


def decode_snapshot(
    tournament_id: str, data: dict[str, Any] | None
) -> TournamentSnapshot:
    """Fill a stored document with defaults for any field it lacks."""
    snapshot = empty_snapshot(tournament_id)
    if data:
        for key in snapshot:
            if key in data and data[key] is not None:
                snapshot[key] = data[key]  # type: ignore[literal-required]
    snapshot["id"] = tournament_id
    return snapshot


def snapshot_etag(snapshot: TournamentSnapshot | dict[str, Any]) -> str:
    """Return a stable hash of a snapshot's content."""
    canonical = json.dumps(snapshot, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _commit_snapshot(
    transaction: Transaction,
    doc_ref: DocumentReference,
    snapshot: TournamentSnapshot,
    expected_revision: int,
) -> TournamentSnapshot:
    """Write the snapshot if nobody else wrote since it was read."""
    stored = doc_ref.get(transaction=transaction)
    stored_data = (stored.to_dict() or {}) if stored.exists else {}
    stored_revision = int(stored_data.get("revision", 0))
    if stored_revision != expected_revision:
        raise ConflictError(
            f"Tournament '{snapshot['id']}' is at revision {stored_revision}, "
            f"expected {expected_revision}. Reload and try again."
        )

    payload = cast(TournamentSnapshot, dict(snapshot))
    payload["revision"] = expected_revision + 1
    payload["last_update"] = datetime.datetime.now(datetime.timezone.utc).isoformat()
    transaction.set(doc_ref, payload)
    return payload


class SyncGateway:
    """Loads, stores and watches tournament snapshots in Firestore.

    Each tournament (or season) is one document of the ``tournaments``
    collection, replaced as a whole on every write. Writes carry the revision
    they were computed from and are refused when the stored document moved
    on in the meantime.
    """

    def __init__(self, db: Client | None = None) -> None:
        """Initialize the gateway."""
        self.db = db if db is not None else firestore.client()

    def _ref(self, tournament_id: str) -> DocumentReference:
        return self.db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)

    def load(self, tournament_id: str) -> TournamentSnapshot:
        """Fetch a snapshot; a missing document is an empty tournament."""
        try:
            doc = self._ref(tournament_id).get()
        except google_exceptions.GoogleAPIError as e:
            logging.error(f"Failed to load tournament {tournament_id}: {e}")
            raise SyncError("The tournament could not be loaded.") from e

        if not doc.exists:
            return empty_snapshot(tournament_id)
        return decode_snapshot(tournament_id, doc.to_dict())

    def save(
        self, snapshot: TournamentSnapshot, expected_revision: int
    ) -> TournamentSnapshot:
        """Store a snapshot computed from ``expected_revision``.

        Returns the stored snapshot, with its new revision and timestamp.
        """
        doc_ref = self._ref(snapshot["id"])
        commit = firestore.transactional(_commit_snapshot)
        try:
            return commit(self.db.transaction(), doc_ref, snapshot, expected_revision)
        except google_exceptions.GoogleAPIError as e:
            logging.error(f"Failed to save tournament {snapshot['id']}: {e}")
            raise SyncError() from e

    def overwrite(self, snapshot: TournamentSnapshot) -> None:
        """Store a snapshot without any revision check."""
        try:
            self._ref(snapshot["id"]).set(dict(snapshot))
        except google_exceptions.GoogleAPIError as e:
            logging.error(f"Failed to overwrite tournament {snapshot['id']}: {e}")
            raise SyncError() from e

    def exists(self, tournament_id: str) -> bool:
        """Return whether a document is stored under the key."""
        return bool(self._ref(tournament_id).get().exists)

    def subscribe(
        self, tournament_id: str, callback: Callable[[TournamentSnapshot], None]
    ) -> Watch:
        """Call ``callback`` with every new version of the snapshot.

        Returns the watch; call ``unsubscribe()`` on it to stop listening.
        """

        def on_snapshot(doc_snapshots: list[Any], changes: Any, read_time: Any) -> None:
            for doc in doc_snapshots:
                data = doc.to_dict() if doc.exists else None
                callback(decode_snapshot(tournament_id, data))

        return self._ref(tournament_id).on_snapshot(on_snapshot)
