"""Bounded, most-recent-first feed of tournament notices."""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable
from typing import Any

from sinuca.constants import EVENT_LOG_LIMIT, EVENT_TYPES

from .models import TournamentEvent


def now_ms() -> int:
    """Return the current time as epoch milliseconds."""
    return int(time.time() * 1000)


class EventLog:
    """Pure helpers over the event list stored in a snapshot.

    Events are never edited once appended; every helper returns a new list.
    """

    LIMIT = EVENT_LOG_LIMIT

    @staticmethod
    def new_event(
        event_type: str, message: str, details: Any = None
    ) -> TournamentEvent:
        """Build an event record."""
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type}")
        event: TournamentEvent = {
            "id": uuid.uuid4().hex,
            "type": event_type,
            "message": message,
            "timestamp": now_ms(),
        }
        if details is not None:
            event["details"] = details
        return event

    @staticmethod
    def append(
        events: list[TournamentEvent], event: TournamentEvent
    ) -> list[TournamentEvent]:
        """Put the event at the front and drop the oldest past the limit."""
        return [event, *events][: EventLog.LIMIT]

    @staticmethod
    def extend(
        events: list[TournamentEvent], new_events: Iterable[TournamentEvent]
    ) -> list[TournamentEvent]:
        """Append several events in the order they happened."""
        result = list(events)
        for event in new_events:
            result = EventLog.append(result, event)
        return result

    @staticmethod
    def clear() -> list[TournamentEvent]:
        """Return an empty log."""
        return []
