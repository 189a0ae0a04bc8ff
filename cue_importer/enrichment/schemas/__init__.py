"""Enrichment schemas."""

from cue_importer.enrichment.schemas.enriched_cue import EnrichedCue
from cue_importer.enrichment.schemas.file_metadata import FileMetadata
from cue_importer.enrichment.schemas.learned_track import LearnedTrack, TrackMatch
from cue_importer.enrichment.schemas.provenance import EnrichedField, FieldValue, ProvenanceSource

__all__ = [
    "EnrichedCue",
    "EnrichedField",
    "FieldValue",
    "FileMetadata",
    "LearnedTrack",
    "ProvenanceSource",
    "TrackMatch",
]
