"""Confidence values assigned by the categorizer."""

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel


class CategorizerThresholds(BaseCueModel):
    """Heuristic confidence scores per categorization outcome."""

    non_music: float = Field(default=0.95, ge=0, le=1)
    stem_floor: float = Field(default=0.90, ge=0, le=1)
    sfx_match: float = Field(default=0.90, ge=0, le=1)
    main_with_library: float = Field(default=0.90, ge=0, le=1)
    main_without_library: float = Field(default=0.60, ge=0, le=1)

    # Below this a clip is flagged for remote review
    low_confidence: float = Field(default=0.80, ge=0, le=1)
