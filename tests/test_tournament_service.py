"""Tests for the tournament service."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from sinuca.bracket.engine import BracketEngine, CommandResult
from sinuca.bracket.services import TournamentService
from sinuca.errors import ConflictError, ValidationError

from tests.helpers import TEST_TOURNAMENT_ID
from tests.mock_utils import MockFirestoreBuilder


class TournamentServiceTestCase(unittest.TestCase):
    """Test case for the load, apply, store cycle."""

    def setUp(self) -> None:
        """Set up a mock database."""
        self.db = MockFirestoreBuilder.build_db()
        patcher = patch(
            "sinuca.sync.gateway.firestore",
            new=MockFirestoreBuilder.build_firestore_module(self.db),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def _execute(self, command, *args, **kwargs) -> CommandResult:
        return TournamentService.execute(
            TEST_TOURNAMENT_ID, command, *args, db=self.db, **kwargs
        )

    def test_execute_stores_snapshot_and_events(self) -> None:
        """Test that a command's result and events are persisted."""
        result = self._execute(BracketEngine.register_participant, "Ana", [1, 2])

        self.assertEqual(result.snapshot["revision"], 1)
        self.assertEqual(len(result.events), 1)

        stored = TournamentService.get_snapshot(TEST_TOURNAMENT_ID, db=self.db)
        self.assertEqual(stored["revision"], 1)
        self.assertEqual([e["number"] for e in stored["entries"]], [1, 2])
        self.assertEqual(stored["events"][0]["type"], "registration")

    def test_events_accumulate_newest_first(self) -> None:
        """Test that later events are placed in front."""
        self._execute(BracketEngine.register_participant, "Ana", [1])
        self._execute(BracketEngine.register_participant, "Bruno", [2])

        stored = TournamentService.get_snapshot(TEST_TOURNAMENT_ID, db=self.db)
        self.assertIn("Bruno", stored["events"][0]["message"])
        self.assertIn("Ana", stored["events"][1]["message"])
        self.assertEqual(stored["revision"], 2)

    def test_rejected_command_stores_nothing(self) -> None:
        """Test that a failing command leaves the stored tournament alone."""
        self._execute(BracketEngine.register_participant, "Ana", [1])

        with self.assertRaises(ValidationError):
            self._execute(BracketEngine.register_participant, "Bruno", [1])

        stored = TournamentService.get_snapshot(TEST_TOURNAMENT_ID, db=self.db)
        self.assertEqual(stored["revision"], 1)
        self.assertEqual(len(stored["participants"]), 1)

    def test_concurrent_write_is_refused(self) -> None:
        """Test that a write racing another one fails with ConflictError."""
        db = self.db

        def racing_command(snapshot):
            db.collection("tournaments").document(TEST_TOURNAMENT_ID).set(
                {"revision": snapshot["revision"] + 1}
            )
            return BracketEngine.register_participant(snapshot, "Ana", [1])

        with self.assertRaises(ConflictError):
            self._execute(racing_command)

        stored = TournamentService.get_snapshot(TEST_TOURNAMENT_ID, db=self.db)
        self.assertEqual(stored["participants"], [])

    def test_keyword_arguments_reach_the_command(self) -> None:
        """Test that options such as force are passed through."""
        result = self._execute(BracketEngine.advance_round, force=True)
        self.assertEqual(result.snapshot["current_round"], 2)


if __name__ == "__main__":
    unittest.main()
