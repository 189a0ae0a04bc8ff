"""Cue-sheet durations for classified clips."""

from cue_importer.durations.calculate_durations import (
    calculate_durations,
    duration_fields,
    with_duration,
)

__all__ = [
    "calculate_durations",
    "duration_fields",
    "with_duration",
]
