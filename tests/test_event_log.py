"""Tests for the event log."""

from __future__ import annotations

import unittest

from sinuca.bracket.events import EventLog


class EventLogTestCase(unittest.TestCase):
    """Test case for the bounded event log."""

    def test_new_event(self) -> None:
        """Test that events carry an id, a type and a timestamp."""
        event = EventLog.new_event("registration", "Ana registered.", {"entryNumbers": [1]})

        self.assertEqual(event["type"], "registration")
        self.assertEqual(event["message"], "Ana registered.")
        self.assertEqual(event["details"], {"entryNumbers": [1]})
        self.assertTrue(event["id"])
        self.assertGreater(event["timestamp"], 0)

    def test_new_event_without_details(self) -> None:
        """Test that details are left out when not given."""
        event = EventLog.new_event("match-progress", "Live.")
        self.assertNotIn("details", event)

    def test_new_event_unknown_type(self) -> None:
        """Test that only the known event types are accepted."""
        with self.assertRaises(ValueError):
            EventLog.new_event("gossip", "Nope.")

    def test_append_most_recent_first(self) -> None:
        """Test that the newest event is at the front."""
        first = EventLog.new_event("registration", "first")
        second = EventLog.new_event("registration", "second")

        events = EventLog.append(EventLog.append([], first), second)

        self.assertEqual([e["message"] for e in events], ["second", "first"])

    def test_append_caps_the_log(self) -> None:
        """Test that the 101st event pushes the oldest one out."""
        events: list = []
        for i in range(101):
            events = EventLog.append(events, EventLog.new_event("registration", str(i)))

        self.assertEqual(len(events), 100)
        self.assertEqual(events[0]["message"], "100")
        self.assertEqual(events[-1]["message"], "1")

    def test_append_does_not_modify_input(self) -> None:
        """Test that a new list is returned."""
        events: list = []
        EventLog.append(events, EventLog.new_event("registration", "x"))
        self.assertEqual(events, [])

    def test_extend_keeps_order(self) -> None:
        """Test that events added together end up newest first."""
        batch = [
            EventLog.new_event("match-finished", "won"),
            EventLog.new_event("match-finished", "champion"),
        ]

        events = EventLog.extend([], batch)

        self.assertEqual([e["message"] for e in events], ["champion", "won"])

    def test_clear(self) -> None:
        """Test that clearing gives an empty log."""
        self.assertEqual(EventLog.clear(), [])


if __name__ == "__main__":
    unittest.main()
