"""Tournament bracket domain: entities, rules and the event log."""

from .engine import BracketEngine, CommandResult
from .events import EventLog
from .models import Entry, Match, Participant, TournamentEvent, TournamentSnapshot

__all__ = [
    "BracketEngine",
    "CommandResult",
    "Entry",
    "EventLog",
    "Match",
    "Participant",
    "TournamentEvent",
    "TournamentSnapshot",
]
