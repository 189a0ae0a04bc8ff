"""A raw clip with its cue type and filename-derived track information."""

from pydantic import Field

from cue_importer.categorizer.schemas.cue_type import CueType
from cue_importer.project_parser.schemas import RawClip


class ClassifiedClip(RawClip):
    """A clip after categorization."""

    cue_type: CueType
    confidence: float = Field(ge=0, le=1)
    classification_reason: str
    matched_pattern: str | None = None

    base_track_name: str
    display_name: str
    library: str | None = None
    catalog_code: str | None = None
    artist: str | None = None
    source: str | None = None
    stem_part: str | None = None
    is_stem: bool = False

    is_low_confidence: bool = False
