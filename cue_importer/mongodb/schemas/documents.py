"""MongoDB document schemas for cue importer entities."""

import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic_mongo import PydanticObjectId

from cue_importer.enrichment.schemas import LearnedTrack
from cue_importer.pattern_engine.schemas import (
    Pattern,
    PatternAction,
    PatternType,
    TrackContext,
    UserAction,
    UserActionType,
)


def pattern_natural_key(
    pattern_type: PatternType, condition: dict[str, str], action: PatternAction
) -> str:
    """Canonical string form of ``(pattern_type, condition, action)``."""
    return json.dumps(
        [str(pattern_type), condition, action.model_dump(mode="json")],
        sort_keys=True,
    )


class PatternDocument(BaseModel):
    """A learned pattern with its usage statistics."""

    model_config = ConfigDict(populate_by_name=True)

    id: PydanticObjectId | None = Field(default=None, alias="_id")
    natural_key: str

    pattern_type: PatternType
    condition: dict[str, str] = Field(default_factory=dict)
    action: PatternAction
    confidence: float = 0.5

    times_applied: int = 0
    times_confirmed: int = 0
    times_overridden: int = 0
    reasoning: str | None = None

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    last_applied_at: datetime | None = None

    @classmethod
    def from_pattern(cls, pattern: Pattern) -> "PatternDocument":
        return cls(
            natural_key=pattern_natural_key(pattern.pattern_type, pattern.condition, pattern.action),
            pattern_type=pattern.pattern_type,
            condition=pattern.condition,
            action=pattern.action,
            confidence=pattern.confidence,
            times_applied=pattern.times_applied,
            times_confirmed=pattern.times_confirmed,
            times_overridden=pattern.times_overridden,
            reasoning=pattern.reasoning,
        )

    def to_pattern(self) -> Pattern:
        return Pattern(
            id=str(self.id) if self.id is not None else None,
            pattern_type=self.pattern_type,
            condition=self.condition,
            action=self.action,
            confidence=max(0.0, min(1.0, self.confidence)),
            times_applied=self.times_applied,
            times_confirmed=self.times_confirmed,
            times_overridden=self.times_overridden,
            reasoning=self.reasoning,
        )


class UserActionDocument(BaseModel):
    """One entry of the user correction log."""

    model_config = ConfigDict(populate_by_name=True)

    id: PydanticObjectId | None = Field(default=None, alias="_id")

    action_type: UserActionType
    track_context: dict[str, Any] = Field(default_factory=dict)
    field: str
    old_value: str | None = None
    new_value: str | None = None

    from_suggestion: bool = False
    suggestion_options: list[dict[str, Any]] = Field(default_factory=list)
    pattern_id: str | None = None
    confidence_at_action: float | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_action(cls, action: UserAction) -> "UserActionDocument":
        return cls(
            action_type=action.action_type,
            track_context=action.track_context.model_dump(mode="json"),
            field=action.field,
            old_value=action.old_value,
            new_value=action.new_value,
            from_suggestion=action.from_suggestion,
            suggestion_options=[option.model_dump(mode="json") for option in action.suggestion_options],
            pattern_id=action.pattern_id,
            confidence_at_action=action.confidence_at_action,
            created_at=action.created_at,
        )

    def to_action(self) -> UserAction:
        return UserAction(
            action_type=self.action_type,
            track_context=TrackContext.model_validate(self.track_context),
            field=self.field,
            old_value=self.old_value,
            new_value=self.new_value,
            from_suggestion=self.from_suggestion,
            suggestion_options=self.suggestion_options,
            pattern_id=self.pattern_id,
            confidence_at_action=self.confidence_at_action,
            created_at=self.created_at,
        )


class LearnedTrackDocument(BaseModel):
    """A track approved into the learned database."""

    model_config = ConfigDict(populate_by_name=True)

    id: PydanticObjectId | None = Field(default=None, alias="_id")

    # Natural key: normalised track name + catalog code
    normalized_name: str
    catalog_code: str | None = None

    track_name: str
    composer: str | None = None
    publisher: str | None = None
    library: str | None = None
    artist: str | None = None

    times_used: int = 0
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_track(self) -> LearnedTrack:
        return LearnedTrack(
            track_name=self.track_name,
            catalog_code=self.catalog_code,
            composer=self.composer,
            publisher=self.publisher,
            library=self.library,
            artist=self.artist,
        )
