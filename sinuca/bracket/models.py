"""Data models for the bracket blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from sinuca.constants import DEFAULT_TOURNAMENT_ID
from sinuca.core.types import FirestoreDocument


class Participant(TypedDict):
    """A registered player holding one to three tickets."""

    id: str
    name: str
    entryNumbers: list[int]


class Entry(TypedDict):
    """A numbered draw ticket belonging to a participant."""

    number: int
    participantId: str
    participantName: str
    status: str  # active/eliminated/winner
    currentRound: int


class Match(TypedDict):
    """A head-to-head pairing (or a bye) within a round."""

    id: str
    round: int
    entry1: int | None
    entry2: int | None
    winner: int | None
    isBye: bool
    timestamp: int
    status: str  # pending/in-progress/finished
    isVisible: bool


class _TournamentEventBase(TypedDict):
    id: str
    type: str
    message: str
    timestamp: int


class TournamentEvent(_TournamentEventBase, total=False):
    """A human-readable notice derived from a state transition."""

    details: Any


class TournamentSnapshot(FirestoreDocument):
    """The whole tournament, stored as a single Firestore document."""

    participants: list[Participant]
    entries: list[Entry]
    matches: list[Match]
    current_round: int
    youtube_link: str
    show_live: bool
    events: list[TournamentEvent]


def empty_snapshot(tournament_id: str = DEFAULT_TOURNAMENT_ID) -> TournamentSnapshot:
    """Return the default snapshot used when no document exists yet."""
    return {
        "id": tournament_id,
        "participants": [],
        "entries": [],
        "matches": [],
        "current_round": 1,
        "youtube_link": "",
        "show_live": False,
        "events": [],
        "last_update": "",
        "revision": 0,
    }
