"""Clips as read from the project container."""

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel


class RawClip(BaseCueModel):
    """An audio clip name with its aggregated timeline usage."""

    id: str
    original_name: str

    # Sum of every placement's length; drives the displayed duration
    total_ticks: int = Field(default=0, ge=0)
    # Longest single placement
    max_ticks: int = Field(default=0, ge=0)
    instance_count: int = Field(default=0, ge=0)
