from pydantic import Field

from cue_importer.categorizer.schemas.classified_clip import ClassifiedClip
from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.common.stage_summary import StageSummary


class CategorizationResult(BaseCueModel):
    """Classified clips plus the clips set aside as non-music."""

    clips: list[ClassifiedClip] = Field(default_factory=list)
    # Non-music clips kept for review, never part of the cue stream
    excluded: list[ClassifiedClip] = Field(default_factory=list)
    free_sfx_count: int = 0
    summary: StageSummary
