"""Global constants for the LEMS application."""

# Database-related constants
FIRESTORE_BATCH_LIMIT = 400

# Collection names
EVENTS_COLLECTION = "events"
EVENT_STATES_COLLECTION = "event_states"
TEAMS_COLLECTION = "teams"
TABLES_COLLECTION = "tables"
ROOMS_COLLECTION = "rooms"
MATCHES_COLLECTION = "matches"
SESSIONS_COLLECTION = "sessions"

# Field shared by every per-event document
EVENT_ID_FIELD = "eventId"

# Schedule document format
SUPPORTED_SCHEDULE_VERSION = 2
BLOCK_MARKER = "Block Format"

TEAMS_BLOCK_ID = 1
RANKING_MATCHES_BLOCK_ID = 2
JUDGING_SESSIONS_BLOCK_ID = 3
PRACTICE_MATCHES_BLOCK_ID = 4

# Upload limits
SCHEDULE_MAX_UPLOAD_BYTES = 2 * 1024 * 1024
SCHEDULE_FILE_EXTENSIONS = ["csv"]

# Initial status values
STATUS_NOT_STARTED = "not-started"
PRESENCE_NO_SHOW = "no-show"
