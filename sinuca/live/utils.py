"""Utility functions for the live stream and the public state feed."""

from __future__ import annotations

import json
import re
from typing import Any

from sinuca.bracket.models import TournamentEvent, TournamentSnapshot
from sinuca.bracket.utils import champion
from sinuca.constants import YOUTUBE_EMBED_BASE_URL, YOUTUBE_ID_LENGTH

YOUTUBE_URL_RE = re.compile(r"^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")


def youtube_video_id(url: str | None) -> str | None:
    """Extract the video id from the usual YouTube link shapes."""
    if not url:
        return None
    match = YOUTUBE_URL_RE.match(url.strip())
    if match and len(match.group(2)) == YOUTUBE_ID_LENGTH:
        return match.group(2)
    return None


def embed_url(video_id: str | None) -> str | None:
    """Return the embeddable player URL for a video id."""
    if not video_id:
        return None
    return f"{YOUTUBE_EMBED_BASE_URL}{video_id}?autoplay=1&mute=1"


def _event_is_public(event: TournamentEvent, visible_ids: set[str]) -> bool:
    details = event.get("details")
    if isinstance(details, dict) and "matchId" in details:
        # Deleted matches count as hidden.
        return details["matchId"] in visible_ids
    return True


def public_state(
    snapshot: TournamentSnapshot, include_hidden: bool = False
) -> dict[str, Any]:
    """Return the snapshot as served to browsers.

    Visitors only receive matches an admin has made visible, and only the
    events that do not point at any other match.
    """
    state: dict[str, Any] = dict(snapshot)
    if not include_hidden:
        state["matches"] = [m for m in snapshot["matches"] if m["isVisible"]]
        visible_ids = {m["id"] for m in state["matches"]}
        state["events"] = [
            e for e in snapshot["events"] if _event_is_public(e, visible_ids)
        ]
    state["champion"] = champion(snapshot)
    state["video_id"] = youtube_video_id(snapshot["youtube_link"])
    return state


def format_sse(event: str, data: Any) -> str:
    """Format one Server-Sent Event message."""
    payload = data if isinstance(data, str) else json.dumps(data, default=str)
    return f"event: {event}\ndata: {payload}\n\n"
