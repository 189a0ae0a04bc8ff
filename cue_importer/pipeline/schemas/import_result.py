"""What an import run returns."""

from pydantic import Field

from cue_importer.categorizer.schemas import CueType
from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.common.stage_summary import StageSummary
from cue_importer.enrichment.schemas import EnrichedCue, EnrichedField


class FinalSummary(BaseCueModel):
    """Headline numbers for the finished cue list."""

    project_name: str
    total_cues: int = 0
    main_cues: int = 0
    sfx_cues: int = 0
    with_composer: int = 0
    with_publisher: int = 0
    complete: int = 0
    total_elapsed_ms: int = 0

    @classmethod
    def from_cues(cls, project_name: str, cues: list[EnrichedCue], total_elapsed_ms: int) -> "FinalSummary":
        with_composer = [cue for cue in cues if cue.has_field(EnrichedField.COMPOSER)]
        return cls(
            project_name=project_name,
            total_cues=len(cues),
            main_cues=sum(1 for cue in cues if cue.cue_type == CueType.MAIN),
            sfx_cues=sum(1 for cue in cues if cue.cue_type == CueType.SFX),
            with_composer=len(with_composer),
            with_publisher=sum(1 for cue in cues if cue.has_field(EnrichedField.PUBLISHER)),
            complete=sum(1 for cue in with_composer if cue.has_field(EnrichedField.PUBLISHER)),
            total_elapsed_ms=total_elapsed_ms,
        )


class ImportResult(BaseCueModel):
    """The cue list for one project, with per-stage reporting.

    ``cues`` holds main and SFX cues in discovery order; stems appear only
    nested under their parent. ``excluded`` holds non-music clips for review.
    """

    import_id: str
    project_name: str
    spot_title: str
    file_path: str
    cues: list[EnrichedCue] = Field(default_factory=list)
    excluded: list[EnrichedCue] = Field(default_factory=list)
    summaries: list[StageSummary] = Field(default_factory=list)
    final_summary: FinalSummary
    total_elapsed_ms: int = 0
