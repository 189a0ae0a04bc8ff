from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.pattern_engine.schemas.pattern import PatternType


class PatternMatch(BaseCueModel):
    """A pattern that applies to a track, with the value it suggests."""

    pattern_id: str
    value: str
    confidence: float
    reasoning: str
    pattern_type: PatternType
    times_applied: int = 0
    times_confirmed: int = 0
