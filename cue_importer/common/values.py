"""Helpers for cue-sheet field values."""

# Placeholders that count as an empty field
EMPTY_MARKERS = frozenset({"", "-", "n/a", "null", "undefined"})


def has_content(value: object) -> bool:
    """Whether ``value`` holds a meaningful field value."""
    if value is None:
        return False
    return str(value).strip().lower() not in EMPTY_MARKERS
