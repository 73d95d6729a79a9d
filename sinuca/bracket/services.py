"""Service layer running bracket commands against the stored snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sinuca.sync.gateway import SyncGateway

from .engine import CommandResult
from .events import EventLog
from .models import TournamentSnapshot

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class TournamentService:
    """Handles the load, apply, store cycle of tournament commands."""

    @staticmethod
    def get_snapshot(tournament_id: str, db: Client | None = None) -> TournamentSnapshot:
        """Fetch the current snapshot of a tournament."""
        return SyncGateway(db).load(tournament_id)

    @staticmethod
    def execute(
        tournament_id: str,
        command: Callable[..., CommandResult],
        *args: Any,
        db: Client | None = None,
        **kwargs: Any,
    ) -> CommandResult:
        """Apply a ``BracketEngine`` command and store the result.

        The command runs on the stored snapshot; its events are added to the
        log and the new snapshot is written only if nobody else wrote in the
        meantime. Errors leave the stored tournament untouched.
        """
        gateway = SyncGateway(db)
        snapshot = gateway.load(tournament_id)
        result = command(snapshot, *args, **kwargs)

        next_snapshot = result.snapshot
        next_snapshot["events"] = EventLog.extend(next_snapshot["events"], result.events)
        saved = gateway.save(next_snapshot, expected_revision=snapshot["revision"])
        logging.info(
            f"Tournament {tournament_id}: {command.__name__} stored "
            f"as revision {saved['revision']}"
        )
        return CommandResult(saved, result.events)
