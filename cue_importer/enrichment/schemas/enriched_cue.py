"""A grouped cue with provenance-tracked metadata fields."""

from pydantic import Field

from cue_importer.categorizer.schemas import CueType
from cue_importer.common.values import has_content
from cue_importer.enrichment.schemas.provenance import EnrichedField, FieldValue, ProvenanceSource
from cue_importer.pattern_engine.schemas import TrackContext
from cue_importer.stem_grouper.schemas import GroupedCue


class EnrichedCue(GroupedCue):
    """A cue sheet line with its metadata fields.

    Fields are only ever written while empty; ``with_field`` is the single
    place that rule is enforced.
    """

    fields: dict[EnrichedField, FieldValue] = Field(default_factory=dict)

    matched_track: str | None = None
    match_confidence: float | None = None
    match_reason: str | None = None

    remote_classified: bool = False
    remote_reasoning: str | None = None

    @property
    def excluded(self) -> bool:
        return self.cue_type == CueType.EXCLUDED

    @classmethod
    def from_grouped(cls, cue: GroupedCue) -> "EnrichedCue":
        """Start enrichment from what the filename already told us."""
        enriched = cls(**cue.model_dump())
        for field, value in (
            (EnrichedField.LIBRARY, cue.library),
            (EnrichedField.ARTIST, cue.artist),
            (EnrichedField.SOURCE, cue.source),
        ):
            enriched = enriched.with_field(field, value, ProvenanceSource.FILENAME, cue.confidence)
        return enriched

    def field_value(self, field: EnrichedField) -> str | None:
        """The field's value, or None when it is empty."""
        current = self.fields.get(field)
        if current is None or not has_content(current.value):
            return None
        return current.value

    def has_field(self, field: EnrichedField) -> bool:
        return self.field_value(field) is not None

    def with_field(
        self,
        field: EnrichedField,
        value: str | None,
        source: ProvenanceSource,
        confidence: float,
        pattern_id: str | None = None,
        reason: str | None = None,
    ) -> "EnrichedCue":
        """Return a copy with ``field`` set, unless it already has content.

        Empty candidate values are ignored as well, so callers can pass
        lookups through without checking them first.
        """
        if self.has_field(field) or value is None or not has_content(value):
            return self
        fields = dict(self.fields)
        fields[field] = FieldValue(
            value=value.strip(),
            source=source,
            confidence=max(0.0, min(1.0, confidence)),
            pattern_id=pattern_id,
            reason=reason,
        )
        return self.model_copy(update={"fields": fields})

    def track_context(self) -> TrackContext:
        """The pattern engine's view of this cue."""
        return TrackContext(
            id=self.id,
            track_name=self.display_name,
            track_type=str(self.cue_type),
            library=self.field_value(EnrichedField.LIBRARY),
            catalog_code=self.catalog_code,
            source=self.field_value(EnrichedField.SOURCE),
            artist=self.field_value(EnrichedField.ARTIST),
            label=self.field_value(EnrichedField.LABEL),
            composer=self.field_value(EnrichedField.COMPOSER),
            publisher=self.field_value(EnrichedField.PUBLISHER),
        )
