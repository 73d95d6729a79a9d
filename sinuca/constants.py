"""Global constants for the sinuca application."""

# Firestore
TOURNAMENTS_COLLECTION = "tournaments"
DEFAULT_TOURNAMENT_ID = "main"
DEFAULT_MOTTO = "Onde a tática encontra a precisão."

# Tickets
MIN_TICKET = 1
MAX_TICKET = 200
MAX_TICKETS_PER_PARTICIPANT = 3

# Event log
EVENT_LOG_LIMIT = 100

# Entry statuses
ENTRY_ACTIVE = "active"
ENTRY_ELIMINATED = "eliminated"
ENTRY_WINNER = "winner"

# Match statuses
MATCH_PENDING = "pending"
MATCH_IN_PROGRESS = "in-progress"
MATCH_FINISHED = "finished"
MATCH_STATUSES = (MATCH_PENDING, MATCH_IN_PROGRESS, MATCH_FINISHED)

# Event types
EVENT_REGISTRATION = "registration"
EVENT_MATCH_PENDING = "match-pending"
EVENT_MATCH_PROGRESS = "match-progress"
EVENT_MATCH_FINISHED = "match-finished"
EVENT_TYPES = (
    EVENT_REGISTRATION,
    EVENT_MATCH_PENDING,
    EVENT_MATCH_PROGRESS,
    EVENT_MATCH_FINISHED,
)

# Session keys
SESSION_IS_ADMIN = "is_admin"

# Live stream
YOUTUBE_ID_LENGTH = 11
YOUTUBE_EMBED_BASE_URL = "https://www.youtube.com/embed/"
