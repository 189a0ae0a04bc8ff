from enum import StrEnum, auto

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel


class EnrichedField(StrEnum):
    """Cue sheet fields filled by the enrichment chain."""

    COMPOSER = auto()
    PUBLISHER = auto()
    ARTIST = auto()
    LABEL = auto()
    SOURCE = auto()
    LIBRARY = auto()
    USE = auto()


class ProvenanceSource(StrEnum):
    """Which stage produced a field value."""

    FILENAME = auto()
    FILE_METADATA = auto()
    LEARNED_DB = auto()
    PATTERN = auto()
    REMOTE_CLASSIFIER = auto()
    DEFAULT = auto()


class FieldValue(BaseCueModel):
    """A field value with where it came from and how sure that source is."""

    value: str
    source: ProvenanceSource
    confidence: float = Field(ge=0, le=1)
    pattern_id: str | None = None
    reason: str | None = None
