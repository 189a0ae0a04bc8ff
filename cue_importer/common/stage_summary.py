"""Per-stage reporting shared by every pipeline step."""

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel


class StageSummary(BaseCueModel):
    """What a pipeline step consumed, produced and counted."""

    step_name: str
    input_count: int = 0
    output_count: int = 0
    elapsed_ms: int = 0

    # Set when an optional step did not run
    skipped: bool = False
    reason: str | None = None

    counts: dict[str, int | float] = Field(default_factory=dict)
    samples: list[str] = Field(default_factory=list)
