"""Common builders for tests."""

from __future__ import annotations

import unittest
from typing import Any
from unittest.mock import patch

from sinuca import create_app
from sinuca.bracket.engine import BracketEngine
from sinuca.bracket.models import Match, TournamentSnapshot, empty_snapshot
from sinuca.sync.gateway import SyncGateway

from tests.mock_utils import MockFirestoreBuilder

TEST_TOURNAMENT_ID = "test"


def build_snapshot(
    *participants: tuple[str, list[int]], current_round: int = 1
) -> TournamentSnapshot:
    """Register the given (name, tickets) pairs on an empty tournament."""
    snapshot = empty_snapshot(TEST_TOURNAMENT_ID)
    snapshot["current_round"] = current_round
    for name, tickets in participants:
        snapshot = BracketEngine.register_participant(snapshot, name, tickets).snapshot
    return snapshot


def participant_id(snapshot: TournamentSnapshot, name: str) -> str:
    """Return the id of the participant with the given name."""
    return next(p["id"] for p in snapshot["participants"] if p["name"] == name)


def entry(snapshot: TournamentSnapshot, number: int) -> dict[str, Any]:
    """Return the entry holding a ticket."""
    return next(dict(e) for e in snapshot["entries"] if e["number"] == number)


def last_match(snapshot: TournamentSnapshot) -> Match:
    """Return the most recently created match."""
    return snapshot["matches"][-1]


def play(
    snapshot: TournamentSnapshot, round_number: int, winner: int, loser: int
) -> TournamentSnapshot:
    """Pair two tickets and record the winner."""
    snapshot = BracketEngine.create_match(snapshot, round_number, winner, loser).snapshot
    match_id = last_match(snapshot)["id"]
    return BracketEngine.set_winner(snapshot, match_id, winner).snapshot


class AppTestCase(unittest.TestCase):
    """Base test case running the app against a mock database."""

    def setUp(self) -> None:
        """Set up a test client bound to a fresh mock database."""
        self.db = MockFirestoreBuilder.build_db()
        patcher = patch(
            "sinuca.sync.gateway.firestore",
            new=MockFirestoreBuilder.build_firestore_module(self.db),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

        self.app = create_app(
            {
                "TESTING": True,
                "WTF_CSRF_ENABLED": False,
                "SECRET_KEY": "test",
                "ADMIN_PASSWORD": "s3cret",
                "TOURNAMENT_ID": TEST_TOURNAMENT_ID,
            }
        )
        self.client = self.app.test_client()

    def login_admin(self) -> None:
        """Mark the test client's session as admin."""
        with self.client.session_transaction() as sess:
            sess["is_admin"] = True

    def store(self, snapshot: TournamentSnapshot) -> None:
        """Write a snapshot straight to the mock database."""
        SyncGateway(self.db).overwrite(snapshot)

    def stored(self) -> TournamentSnapshot:
        """Read the stored snapshot back."""
        return SyncGateway(self.db).load(TEST_TOURNAMENT_ID)
