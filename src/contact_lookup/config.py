"""Tunables for Contacts.app queries."""

# Maximum contacts processed per call, bounds the cost of a full scan
MAX_CONTACTS = 100

# Timeout hint for callers, in milliseconds. Lookups do not enforce it; pass
# it as ContactDirectory(timeout_ms=...) to opt in to cancelling slow calls.
TIMEOUT_MS = 5000
