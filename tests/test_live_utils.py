"""Tests for the live stream helpers."""

from __future__ import annotations

import json
import unittest

from sinuca.bracket.engine import BracketEngine
from sinuca.bracket.events import EventLog
from sinuca.live.utils import embed_url, format_sse, public_state, youtube_video_id

from tests.helpers import build_snapshot, last_match

VIDEO_ID = "dQw4w9WgXcQ"


class YoutubeVideoIdTestCase(unittest.TestCase):
    """Test case for extracting video ids."""

    def test_supported_link_shapes(self) -> None:
        """Test every link shape organisers paste."""
        links = [
            f"https://www.youtube.com/watch?v={VIDEO_ID}",
            f"https://youtube.com/watch?feature=share&v={VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}?t=42",
            f"https://www.youtube.com/embed/{VIDEO_ID}",
            f"https://www.youtube.com/v/{VIDEO_ID}",
            f"  https://www.youtube.com/watch?v={VIDEO_ID}#chat  ",
        ]
        for link in links:
            with self.subTest(link=link):
                self.assertEqual(youtube_video_id(link), VIDEO_ID)

    def test_unparseable_links(self) -> None:
        """Test that anything else yields no id."""
        for link in (None, "", "not a link", "https://youtu.be/short", "https://example.com"):
            with self.subTest(link=link):
                self.assertIsNone(youtube_video_id(link))

    def test_embed_url(self) -> None:
        """Test the player URL."""
        self.assertEqual(
            embed_url(VIDEO_ID),
            f"https://www.youtube.com/embed/{VIDEO_ID}?autoplay=1&mute=1",
        )
        self.assertIsNone(embed_url(None))


class PublicStateTestCase(unittest.TestCase):
    """Test case for the state served to browsers."""

    def setUp(self) -> None:
        """Create one hidden and one visible match."""
        snapshot = build_snapshot(("Ana", [1]), ("Bruno", [2]), ("Caio", [3]), ("Davi", [4]))
        snapshot = BracketEngine.create_match(snapshot, 1, 1, 2).snapshot
        snapshot = BracketEngine.create_match(snapshot, 1, 3, 4).snapshot
        self.visible_id = last_match(snapshot)["id"]
        snapshot = BracketEngine.toggle_visibility(snapshot, self.visible_id).snapshot
        snapshot["youtube_link"] = f"https://youtu.be/{VIDEO_ID}"
        self.snapshot = snapshot

    def test_hidden_matches_are_removed(self) -> None:
        """Test that visitors only see published matches."""
        state = public_state(self.snapshot)

        self.assertEqual([m["id"] for m in state["matches"]], [self.visible_id])
        self.assertEqual(len(self.snapshot["matches"]), 2)
        self.assertEqual(state["video_id"], VIDEO_ID)
        self.assertIsNone(state["champion"])

    def test_admins_see_everything(self) -> None:
        """Test that hidden matches are kept on request."""
        state = public_state(self.snapshot, include_hidden=True)
        self.assertEqual(len(state["matches"]), 2)

    def test_events_of_hidden_matches_are_removed(self) -> None:
        """Test that the log does not announce pairings still hidden."""
        hidden_id = self.snapshot["matches"][0]["id"]
        snapshot = dict(self.snapshot)
        snapshot["events"] = EventLog.extend(
            [],
            [
                EventLog.new_event("registration", "Ana registered."),
                EventLog.new_event("match-pending", "Ana vs Bruno.", {"matchId": hidden_id}),
                EventLog.new_event("match-pending", "Caio vs Davi.", {"matchId": self.visible_id}),
                EventLog.new_event("match-pending", "Old pairing.", {"matchId": "deleted"}),
            ],
        )

        public = public_state(snapshot)  # type: ignore[arg-type]
        admin = public_state(snapshot, include_hidden=True)  # type: ignore[arg-type]

        self.assertEqual(
            [e["message"] for e in public["events"]],
            ["Caio vs Davi.", "Ana registered."],
        )
        self.assertEqual(len(admin["events"]), 4)
        self.assertEqual(len(snapshot["events"]), 4)


class FormatSseTestCase(unittest.TestCase):
    """Test case for Server-Sent Event framing."""

    def test_format_text(self) -> None:
        """Test a plain text payload."""
        self.assertEqual(format_sse("connected", "ok"), "event: connected\ndata: ok\n\n")

    def test_format_json(self) -> None:
        """Test that dictionaries are sent as JSON."""
        message = format_sse("snapshot", {"revision": 3})
        self.assertTrue(message.startswith("event: snapshot\ndata: "))
        self.assertTrue(message.endswith("\n\n"))
        payload = message.split("data: ", 1)[1].strip()
        self.assertEqual(json.loads(payload), {"revision": 3})


if __name__ == "__main__":
    unittest.main()
