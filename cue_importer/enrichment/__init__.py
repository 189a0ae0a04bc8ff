"""Layered, fill-if-empty metadata enrichment for grouped cues."""

from cue_importer.enrichment.file_metadata import (
    MutagenMetadataReader,
    enrich_with_metadata,
    separate_composer_publisher,
)
from cue_importer.enrichment.learned_db import (
    calculate_similarity,
    clean_track_name,
    extract_catalog_code,
    find_best_match,
    match_learned_db,
)
from cue_importer.enrichment.pattern_fill import apply_patterns
from cue_importer.enrichment.protocols import MetadataReader, RemoteClassifier, TrackDatabase
from cue_importer.enrichment.remote_classifier import (
    classify_low_confidence,
    parse_classifier_response,
    strip_code_fences,
)
from cue_importer.enrichment.use_type import UseType, detect_use_type, detect_use_types

__all__ = [
    "MetadataReader",
    "MutagenMetadataReader",
    "RemoteClassifier",
    "TrackDatabase",
    "UseType",
    "apply_patterns",
    "calculate_similarity",
    "classify_low_confidence",
    "clean_track_name",
    "detect_use_type",
    "detect_use_types",
    "enrich_with_metadata",
    "extract_catalog_code",
    "find_best_match",
    "match_learned_db",
    "parse_classifier_response",
    "separate_composer_publisher",
    "strip_code_fences",
]
