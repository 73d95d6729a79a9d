"""Bracket engine: the rules of the single-elimination tournament.

Every operation takes the current snapshot and returns a ``CommandResult``
holding the next snapshot and the events the transition produced. The input
snapshot is never modified, so a rejected command leaves the caller's state
exactly as it was.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterable
from typing import NamedTuple

from sinuca.constants import (
    ENTRY_ACTIVE,
    ENTRY_ELIMINATED,
    EVENT_MATCH_FINISHED,
    EVENT_MATCH_PENDING,
    EVENT_MATCH_PROGRESS,
    EVENT_REGISTRATION,
    MATCH_FINISHED,
    MATCH_IN_PROGRESS,
    MATCH_PENDING,
    MATCH_STATUSES,
    MAX_TICKET,
    MAX_TICKETS_PER_PARTICIPANT,
    MIN_TICKET,
)
from sinuca.errors import NotFoundError, SelfMatchError, ValidationError

from .events import EventLog, now_ms
from .models import Entry, Match, Participant, TournamentEvent, TournamentSnapshot
from .utils import champion, unmatched_entries


class CommandResult(NamedTuple):
    """The outcome of a bracket command."""

    snapshot: TournamentSnapshot
    events: list[TournamentEvent]


def _copy(snapshot: TournamentSnapshot) -> TournamentSnapshot:
    return copy.deepcopy(snapshot)


def _get_match(snapshot: TournamentSnapshot, match_id: str) -> Match:
    for match in snapshot["matches"]:
        if match["id"] == match_id:
            return match
    raise NotFoundError(f"Match {match_id} not found.")


def _get_participant(snapshot: TournamentSnapshot, participant_id: str) -> Participant:
    for participant in snapshot["participants"]:
        if participant["id"] == participant_id:
            return participant
    raise NotFoundError(f"Participant {participant_id} not found.")


def _entries_by_number(snapshot: TournamentSnapshot) -> dict[int, Entry]:
    return {e["number"]: e for e in snapshot["entries"]}


def _new_match(  # noqa: PLR0913
    round_number: int,
    entry1: int,
    entry2: int | None,
    winner: int | None = None,
    status: str = MATCH_PENDING,
    is_visible: bool = False,
    is_bye: bool = False,
) -> Match:
    return {
        "id": uuid.uuid4().hex,
        "round": round_number,
        "entry1": entry1,
        "entry2": entry2,
        "winner": winner,
        "isBye": is_bye,
        "timestamp": now_ms(),
        "status": status,
        "isVisible": is_visible,
    }


def _apply_result(snapshot: TournamentSnapshot, match: Match, winner: int) -> None:
    """Advance the winner to the next round and eliminate the other ticket."""
    entries = _entries_by_number(snapshot)
    for number in (match["entry1"], match["entry2"]):
        entry = entries.get(number) if number is not None else None
        if entry is None:
            # Participant was removed after the pairing was made.
            continue
        if number == winner:
            entry["status"] = ENTRY_ACTIVE
            entry["currentRound"] = match["round"] + 1
        else:
            entry["status"] = ENTRY_ELIMINATED


def _revert_result(snapshot: TournamentSnapshot, match: Match) -> None:
    """Put both tickets of a match back into the match's round."""
    entries = _entries_by_number(snapshot)
    for number in (match["entry1"], match["entry2"]):
        entry = entries.get(number) if number is not None else None
        if entry is None:
            continue
        entry["status"] = ENTRY_ACTIVE
        entry["currentRound"] = match["round"]


def _champion_events(snapshot: TournamentSnapshot) -> list[TournamentEvent]:
    """Return the champion notice once a single active ticket is left."""
    title = champion(snapshot)
    if title is None:
        return []
    return [
        EventLog.new_event(
            EVENT_MATCH_FINISHED, f"{title} is the champion!", {"champion": title}
        )
    ]


def _describe(match: Match) -> str:
    if match["isBye"]:
        return f"#{match['entry1']} (bye)"
    return f"#{match['entry1']} vs #{match['entry2']}"


class BracketEngine:
    """Commands that move the tournament from one snapshot to the next."""

    @staticmethod
    def register_participant(
        snapshot: TournamentSnapshot, name: str, ticket_numbers: Iterable[int]
    ) -> CommandResult:
        """Register a participant with one entry per ticket."""
        name = (name or "").strip()
        numbers = list(ticket_numbers)
        if not name:
            raise ValidationError("Participant name is required.")
        if not numbers:
            raise ValidationError("At least one ticket number is required.")
        if len(numbers) > MAX_TICKETS_PER_PARTICIPANT:
            raise ValidationError(
                f"A participant may hold at most {MAX_TICKETS_PER_PARTICIPANT} tickets."
            )
        out_of_range = [n for n in numbers if not MIN_TICKET <= n <= MAX_TICKET]
        if out_of_range:
            raise ValidationError(
                f"Tickets must be between {MIN_TICKET} and {MAX_TICKET}: "
                f"{', '.join(map(str, out_of_range))}."
            )
        if len(set(numbers)) != len(numbers):
            raise ValidationError("The same ticket was given more than once.")

        taken = _entries_by_number(snapshot)
        collisions = [n for n in numbers if n in taken]
        if collisions:
            raise ValidationError(
                f"Tickets already in use: {', '.join(map(str, collisions))}."
            )

        result = _copy(snapshot)
        participant: Participant = {
            "id": uuid.uuid4().hex,
            "name": name,
            "entryNumbers": numbers,
        }
        result["participants"].append(participant)
        for number in numbers:
            result["entries"].append(
                {
                    "number": number,
                    "participantId": participant["id"],
                    "participantName": name,
                    "status": ENTRY_ACTIVE,
                    "currentRound": result["current_round"],
                }
            )

        event = EventLog.new_event(
            EVENT_REGISTRATION,
            f"{name} registered with tickets {', '.join(map(str, numbers))}.",
            {"participantId": participant["id"], "entryNumbers": numbers},
        )
        return CommandResult(result, [event])

    @staticmethod
    def remove_participant(
        snapshot: TournamentSnapshot, participant_id: str
    ) -> CommandResult:
        """Remove a participant and all of their entries.

        Matches already played keep their raw ticket numbers.
        """
        _get_participant(snapshot, participant_id)
        result = _copy(snapshot)
        result["participants"] = [
            p for p in result["participants"] if p["id"] != participant_id
        ]
        result["entries"] = [
            e for e in result["entries"] if e["participantId"] != participant_id
        ]
        return CommandResult(result, [])

    @staticmethod
    def edit_participant(
        snapshot: TournamentSnapshot, participant_id: str, new_name: str
    ) -> CommandResult:
        """Rename a participant and every entry carrying their name."""
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValidationError("Participant name is required.")
        _get_participant(snapshot, participant_id)

        result = _copy(snapshot)
        _get_participant(result, participant_id)["name"] = new_name
        for entry in result["entries"]:
            if entry["participantId"] == participant_id:
                entry["participantName"] = new_name
        return CommandResult(result, [])

    @staticmethod
    def unmatched_entries(
        snapshot: TournamentSnapshot, round_number: int
    ) -> list[Entry]:
        """Return the tickets of a round still waiting for an opponent."""
        return unmatched_entries(snapshot, round_number)

    @staticmethod
    def create_match(
        snapshot: TournamentSnapshot, round_number: int | None, num1: int, num2: int
    ) -> CommandResult:
        """Pair two unmatched tickets of a round.

        ``round_number=None`` pairs in the snapshot's current round.

        Two tickets of the same participant may only meet from round 2 on.
        Such a pairing is decided on the spot: the larger ticket number goes
        through.
        """
        if round_number is None:
            round_number = snapshot["current_round"]
        if num1 == num2:
            raise ValidationError(f"Ticket {num1} cannot be paired with itself.")

        pool = {e["number"]: e for e in unmatched_entries(snapshot, round_number)}
        for number in (num1, num2):
            if number not in pool:
                raise ValidationError(
                    f"Ticket {number} is not available for pairing in round {round_number}."
                )

        entry1, entry2 = pool[num1], pool[num2]
        result = _copy(snapshot)

        if entry1["participantId"] == entry2["participantId"]:
            if round_number == 1:
                raise SelfMatchError(
                    f"Tickets {num1} and {num2} both belong to "
                    f"{entry1['participantName']}. Redraw one of them."
                )
            winner = max(num1, num2)
            match = _new_match(
                round_number,
                num1,
                num2,
                winner=winner,
                status=MATCH_FINISHED,
                is_visible=True,
            )
            result["matches"].append(match)
            _apply_result(result, match, winner)
            event = EventLog.new_event(
                EVENT_MATCH_FINISHED,
                f"{entry1['participantName']} drew their own tickets "
                f"#{num1} and #{num2}; #{winner} advances.",
                {"matchId": match["id"], "round": round_number, "winner": winner},
            )
            return CommandResult(result, [event] + _champion_events(result))

        match = _new_match(round_number, num1, num2)
        result["matches"].append(match)
        event = EventLog.new_event(
            EVENT_MATCH_PENDING,
            f"Round {round_number}: {entry1['participantName']} (#{num1}) vs "
            f"{entry2['participantName']} (#{num2}).",
            {"matchId": match["id"], "round": round_number},
        )
        return CommandResult(result, [event])

    @staticmethod
    def assign_bye(
        snapshot: TournamentSnapshot, round_number: int | None = None
    ) -> CommandResult:
        """Advance the last unpaired ticket of a round without an opponent."""
        if round_number is None:
            round_number = snapshot["current_round"]
        pool = unmatched_entries(snapshot, round_number)
        if len(pool) != 1:
            raise ValidationError(
                f"A bye needs exactly one unpaired ticket; round {round_number} "
                f"has {len(pool)}."
            )
        number = pool[0]["number"]
        result = _copy(snapshot)
        match = _new_match(
            round_number,
            number,
            None,
            winner=number,
            status=MATCH_FINISHED,
            is_visible=True,
            is_bye=True,
        )
        result["matches"].append(match)
        _apply_result(result, match, number)
        event = EventLog.new_event(
            EVENT_MATCH_FINISHED,
            f"{pool[0]['participantName']} (#{number}) advances with a bye.",
            {"matchId": match["id"], "round": round_number, "winner": number},
        )
        return CommandResult(result, [event] + _champion_events(result))

    @staticmethod
    def set_winner(
        snapshot: TournamentSnapshot, match_id: str, winner_ticket: int
    ) -> CommandResult:
        """Decide a match, replacing any result it already had."""
        match = _get_match(snapshot, match_id)
        if match["isBye"]:
            raise ValidationError("A bye already has its winner.")
        if winner_ticket not in (match["entry1"], match["entry2"]):
            raise ValidationError(
                f"Ticket {winner_ticket} does not play in match {_describe(match)}."
            )

        result = _copy(snapshot)
        match = _get_match(result, match_id)
        if match["winner"] is not None:
            _revert_result(result, match)
        match["winner"] = winner_ticket
        match["status"] = MATCH_FINISHED
        _apply_result(result, match, winner_ticket)

        winner_entry = _entries_by_number(result).get(winner_ticket)
        winner_name = winner_entry["participantName"] if winner_entry else "---"
        events = [
            EventLog.new_event(
                EVENT_MATCH_FINISHED,
                f"{winner_name} (#{winner_ticket}) wins {_describe(match)}.",
                {"matchId": match_id, "round": match["round"], "winner": winner_ticket},
            )
        ]
        return CommandResult(result, events + _champion_events(result))

    @staticmethod
    def reset_match(snapshot: TournamentSnapshot, match_id: str) -> CommandResult:
        """Undo the result of a match.

        Resetting a match that has no winner leaves the snapshot unchanged.
        """
        match = _get_match(snapshot, match_id)
        if match["isBye"]:
            raise ValidationError("A bye cannot be reset; delete it instead.")
        if match["winner"] is None:
            return CommandResult(_copy(snapshot), [])

        result = _copy(snapshot)
        match = _get_match(result, match_id)
        _revert_result(result, match)
        match["winner"] = None
        match["status"] = MATCH_IN_PROGRESS
        event = EventLog.new_event(
            EVENT_MATCH_PROGRESS,
            f"Result of {_describe(match)} was cleared.",
            {"matchId": match_id, "round": match["round"]},
        )
        return CommandResult(result, [event])

    @staticmethod
    def delete_match(snapshot: TournamentSnapshot, match_id: str) -> CommandResult:
        """Delete a match, putting its tickets back into the pool."""
        _get_match(snapshot, match_id)
        result = _copy(snapshot)
        match = _get_match(result, match_id)
        if match["winner"] is not None:
            _revert_result(result, match)
        result["matches"] = [m for m in result["matches"] if m["id"] != match_id]
        return CommandResult(result, [])

    @staticmethod
    def update_match_status(
        snapshot: TournamentSnapshot, match_id: str, status: str
    ) -> CommandResult:
        """Set the display status of a match; entries are not touched."""
        if status not in MATCH_STATUSES:
            raise ValidationError(f"Unknown match status: {status}.")
        _get_match(snapshot, match_id)
        result = _copy(snapshot)
        match = _get_match(result, match_id)
        match["status"] = status

        events = []
        if status == MATCH_IN_PROGRESS:
            events.append(
                EventLog.new_event(
                    EVENT_MATCH_PROGRESS,
                    f"{_describe(match)} is now being played.",
                    {"matchId": match_id, "round": match["round"]},
                )
            )
        return CommandResult(result, events)

    @staticmethod
    def toggle_visibility(snapshot: TournamentSnapshot, match_id: str) -> CommandResult:
        """Show or hide a match on the public bracket."""
        _get_match(snapshot, match_id)
        result = _copy(snapshot)
        match = _get_match(result, match_id)
        match["isVisible"] = not match["isVisible"]
        return CommandResult(result, [])

    @staticmethod
    def advance_round(
        snapshot: TournamentSnapshot, force: bool = False
    ) -> CommandResult:
        """Open the next round.

        Unless forced, every ticket of the current round must have been paired
        (or given a bye) and every match decided.
        """
        current = snapshot["current_round"]
        if not force:
            pool = unmatched_entries(snapshot, current)
            if pool:
                raise ValidationError(
                    f"Round {current} still has unpaired tickets: "
                    f"{', '.join(str(e['number']) for e in pool)}."
                )
            undecided = [
                m
                for m in snapshot["matches"]
                if m["round"] == current and m["winner"] is None
            ]
            if undecided:
                raise ValidationError(
                    f"Round {current} has {len(undecided)} undecided match(es)."
                )

        result = _copy(snapshot)
        result["current_round"] = current + 1
        return CommandResult(result, [])

    @staticmethod
    def reset_current_round(snapshot: TournamentSnapshot) -> CommandResult:
        """Drop the current round's matches and put its tickets back in play."""
        result = _copy(snapshot)
        current = result["current_round"]
        result["matches"] = [m for m in result["matches"] if m["round"] != current]
        for entry in result["entries"]:
            if entry["currentRound"] >= current:
                entry["status"] = ENTRY_ACTIVE
                entry["currentRound"] = current
        return CommandResult(result, [])

    @staticmethod
    def reset_tournament(
        snapshot: TournamentSnapshot, clear_events: bool = False
    ) -> CommandResult:
        """Start over with no participants; the log survives unless cleared."""
        result = _copy(snapshot)
        result["participants"] = []
        result["entries"] = []
        result["matches"] = []
        result["current_round"] = 1
        if clear_events:
            result["events"] = EventLog.clear()
        return CommandResult(result, [])

    @staticmethod
    def clear_events(snapshot: TournamentSnapshot) -> CommandResult:
        """Empty the event log."""
        result = _copy(snapshot)
        result["events"] = EventLog.clear()
        return CommandResult(result, [])

    @staticmethod
    def update_stream_settings(
        snapshot: TournamentSnapshot, youtube_link: str, show_live: bool
    ) -> CommandResult:
        """Store the live-stream link and whether visitors see the player."""
        result = _copy(snapshot)
        result["youtube_link"] = (youtube_link or "").strip()
        result["show_live"] = bool(show_live)
        return CommandResult(result, [])

    @staticmethod
    def champion(snapshot: TournamentSnapshot) -> str | None:
        """Return the champion's name, if the tournament has one."""
        return champion(snapshot)
