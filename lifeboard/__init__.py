# LifeBoard: local entity store and cross-entity queries for the personal dashboard
#
# Components:
#   schema.py      - Record types (Task, Note, Bookmark, Reminder, JournalEntry) + validation
#   slots.py       - Key/value persistence substrate (SQLite, in-memory)
#   store.py       - Entity store: collections and per-kind mutation helpers
#   quadrant.py    - Eisenhower matrix view with remote seeding
#   search.py      - Cross-entity substring search
#   remote.py      - Identity session and remote task source
#   quotes.py      - Quote of the day with per-day cache
#   preferences.py - Theme preference
#   dashboard.py   - Landing page counts
#   config.py      - YAML/env configuration
