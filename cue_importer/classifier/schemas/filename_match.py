"""Result of matching an audio filename against known naming conventions."""

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel


class FilenameMatch(BaseCueModel):
    """Track information extracted from a filename."""

    base_track_name: str
    display_name: str
    library: str | None = None
    catalog_code: str | None = None

    # Album / release the catalog code belongs to, when known
    source: str | None = None
    artist: str | None = None

    is_stem: bool = False
    stem_part: str | None = None

    confidence: float = Field(ge=0, le=1)
    matched_pattern: str
