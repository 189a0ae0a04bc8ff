"""Confidence arithmetic for pattern learning."""

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel


class PatternThresholds(BaseCueModel):
    """Heuristic thresholds and nudges used by the pattern engine."""

    auto_fill: float = Field(default=0.85, ge=0, le=1)
    suggest: float = Field(default=0.50, ge=0, le=1)
    minimum: float = Field(default=0.30, ge=0, le=1)

    confirm_step: float = 0.03
    confirm_cap: float = 0.98
    strengthen_step: float = 0.05
    strengthen_cap: float = 0.95
    override_step: float = 0.10
    override_floor: float = 0.10

    # New pattern seed: min(seed_cap, seed_base + seed_per_action * n)
    seed_base: float = 0.4
    seed_per_action: float = 0.1
    seed_cap: float = 0.7

    min_consistent_actions: int = 3
    recent_action_window: int = 50

    cache_ttl_seconds: float = 300.0
