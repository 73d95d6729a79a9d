"""Utility functions and derived queries over a tournament snapshot."""

from __future__ import annotations

from typing import Any

from sinuca.constants import (
    ENTRY_ACTIVE,
    MATCH_FINISHED,
    MATCH_IN_PROGRESS,
    MATCH_PENDING,
)
from sinuca.errors import ValidationError

from .models import Entry, Match, TournamentSnapshot

PUBLIC_STATUS_ORDER = {MATCH_IN_PROGRESS: 0, MATCH_PENDING: 1, MATCH_FINISHED: 2}


def matched_numbers(matches: list[Match], round_number: int) -> set[int]:
    """Return every ticket already paired in the given round."""
    numbers: set[int] = set()
    for match in matches:
        if match["round"] != round_number:
            continue
        for num in (match["entry1"], match["entry2"]):
            if num is not None:
                numbers.add(num)
    return numbers


def unmatched_entries(snapshot: TournamentSnapshot, round_number: int) -> list[Entry]:
    """Return the pool of active entries of a round that are not yet paired."""
    paired = matched_numbers(snapshot["matches"], round_number)
    return [
        e
        for e in snapshot["entries"]
        if e["status"] == ENTRY_ACTIVE
        and e["currentRound"] == round_number
        and e["number"] not in paired
    ]


def active_entries(snapshot: TournamentSnapshot) -> list[Entry]:
    """Return every entry still in the tournament, ordered by ticket."""
    return sorted(
        (e for e in snapshot["entries"] if e["status"] == ENTRY_ACTIVE),
        key=lambda e: e["number"],
    )


def champion(snapshot: TournamentSnapshot) -> str | None:
    """Return the champion's name once a single active entry remains."""
    remaining = [e for e in snapshot["entries"] if e["status"] == ENTRY_ACTIVE]
    if len(remaining) == 1:
        return remaining[0]["participantName"]
    return None


def find_entry(snapshot: TournamentSnapshot, number: int | None) -> Entry | None:
    """Look up an entry by ticket number."""
    if number is None:
        return None
    for entry in snapshot["entries"]:
        if entry["number"] == number:
            return entry
    return None


def entry_name(snapshot: TournamentSnapshot, number: int | None) -> str:
    """Return the display name for a ticket slot of a match."""
    if number is None:
        return "BYE"
    entry = find_entry(snapshot, number)
    return entry["participantName"] if entry else "---"


def round_matches(snapshot: TournamentSnapshot, round_number: int) -> list[Match]:
    """Return the matches of a round, newest first."""
    matches = [m for m in snapshot["matches"] if m["round"] == round_number]
    return sorted(matches, key=lambda m: m["timestamp"], reverse=True)


def public_matches(snapshot: TournamentSnapshot, round_number: int) -> list[Match]:
    """Return the visible matches of a round in the order visitors see them.

    Matches being played come first, then the ones waiting, then the finished
    ones; within a status the newest match comes first.
    """
    matches = [
        m
        for m in snapshot["matches"]
        if m["round"] == round_number and m["isVisible"]
    ]
    return sorted(
        matches,
        key=lambda m: (PUBLIC_STATUS_ORDER.get(m["status"], 3), -m["timestamp"]),
    )


def played_rounds(snapshot: TournamentSnapshot) -> list[int]:
    """Return every round number up to the current one."""
    return list(range(1, snapshot["current_round"] + 1))


def parse_ticket_numbers(raw: str) -> list[int]:
    """Parse a comma separated list of ticket numbers such as ``"5, 12, 88"``."""
    numbers = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            numbers.append(int(part))
        except ValueError:
            raise ValidationError(f"'{part}' is not a ticket number.") from None
    return numbers


def snapshot_summary(snapshot: TournamentSnapshot) -> dict[str, Any]:
    """Return the headline counters shown on the public page."""
    return {
        "entries": len(snapshot["entries"]),
        "current_round": snapshot["current_round"],
        "active": len(active_entries(snapshot)),
        "champion": champion(snapshot),
    }
