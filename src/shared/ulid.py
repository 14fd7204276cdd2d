"""ULID helpers for record identifiers."""

import ulid

ULID_LENGTH = 26


def generate_ulid() -> str:
    """Return a new, time-ordered identifier; never reused once issued."""
    return str(ulid.new())
