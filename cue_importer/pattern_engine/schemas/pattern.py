"""Learned rules that fill cue fields from track context."""

from enum import StrEnum, auto

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel


class PatternType(StrEnum):
    """How a pattern was derived."""

    LIBRARY_DEFAULT = auto()
    FIELD_COPY = auto()
    FORMAT_RULE = auto()
    CATALOG_PATTERN = auto()
    CONDITIONAL = auto()


class PatternAction(BaseCueModel):
    """The field a pattern fills, with a literal value or another field to copy."""

    field: str
    value: str | None = None
    copy_from: str | None = None


class Pattern(BaseCueModel):
    """A learned ``condition -> action`` rule with usage statistics.

    ``(pattern_type, condition, action)`` is the natural key; the store never
    holds two patterns with the same key.
    """

    id: str | None = None
    pattern_type: PatternType
    condition: dict[str, str] = Field(default_factory=dict)
    action: PatternAction
    confidence: float = Field(default=0.5, ge=0, le=1)

    times_applied: int = 0
    times_confirmed: int = 0
    times_overridden: int = 0

    reasoning: str | None = None
