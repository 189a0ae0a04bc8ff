"""Pattern matching, auto-fill and learning from user corrections."""

import logging
import re

from cue_importer.common.values import has_content
from cue_importer.pattern_engine.cache import PatternCache
from cue_importer.pattern_engine.schemas import (
    CUSTOM_VALUE,
    BatchChoiceGroup,
    ChoiceOption,
    ChoiceSource,
    InteractiveChoices,
    Pattern,
    PatternAction,
    PatternMatch,
    PatternThresholds,
    PatternType,
    TrackContext,
    UserAction,
    UserActionType,
)
from cue_importer.pattern_engine.store import PatternStore

logger = logging.getLogger(__name__)

# Fields patterns may fill automatically, in fill order
AUTO_FILL_FIELDS = ("artist", "source", "label", "publisher", "composer")

LIBRARY_KEYWORDS = ("BMG", "APM", "Artlist", "Epidemic", "Audio Network", "Musicbed")


def extract_library_keyword(library: str) -> str:
    """Reduce a library name to the keyword a ``library_contains`` condition uses."""
    upper = library.upper()
    for keyword in LIBRARY_KEYWORDS:
        if keyword.upper() in upper:
            return keyword
    return re.split(r"[\s\-_]", library)[0]


def determine_pattern_type(condition: dict[str, str]) -> PatternType:
    if "library_contains" in condition or "library" in condition:
        return PatternType.LIBRARY_DEFAULT
    if "catalog_code_prefix" in condition:
        return PatternType.CATALOG_PATTERN
    if "track_type" in condition:
        return PatternType.CONDITIONAL
    return PatternType.LIBRARY_DEFAULT


def matches_condition(track: TrackContext, condition: dict[str, str]) -> bool:
    """Whether every key of ``condition`` holds for ``track``. Empty conditions never match."""
    if not condition:
        return False

    for key, value in condition.items():
        expected = value.lower()
        if key == "library_contains":
            if not track.library or expected not in track.library.lower():
                return False
        elif key == "library":
            if not track.library or track.library.lower() != expected:
                return False
        elif key == "catalog_code_prefix":
            if not track.catalog_code or not track.catalog_code.upper().startswith(value.upper()):
                return False
        elif key == "track_type":
            if track.track_type != value:
                return False
        elif key == "source_contains":
            if not track.source or expected not in track.source.lower():
                return False
        else:
            track_value = track.get(key)
            if not track_value or track_value.lower() != expected:
                return False

    return True


def apply_action(track: TrackContext, action: PatternAction) -> str | None:
    """The value a pattern's action suggests for ``track``."""
    if action.value:
        return action.value
    if action.copy_from:
        return track.get(action.copy_from) or None
    return None


def generate_reasoning(pattern: Pattern) -> str:
    """Describe a pattern that has no stored reasoning."""
    condition = pattern.condition
    action = pattern.action
    target = f'{action.field} = "{action.value}"'

    if "library_contains" in condition:
        return f"Tracks from {condition['library_contains']} libraries typically have {target}"
    if "library" in condition:
        return f"{condition['library']} tracks usually have {target}"
    if "catalog_code_prefix" in condition:
        return (
            f"Tracks with catalog code starting with {condition['catalog_code_prefix']} "
            f"typically have {target}"
        )
    if "track_type" in condition:
        return f"{condition['track_type']} music typically has {target}"
    return f"Based on {pattern.times_confirmed} confirmed uses"


class PatternEngine:
    """Suggests and auto-fills cue fields from learned patterns.

    Patterns are read through a ``PatternCache``; every write made through the
    engine invalidates it so the next read sees the change.

    Args:
        store: Persistence for patterns and user actions.
        thresholds: Confidence thresholds and nudges.
        cache: Pattern cache; one with the configured TTL is created if omitted.
    """

    def __init__(
        self,
        store: PatternStore,
        thresholds: PatternThresholds | None = None,
        cache: PatternCache | None = None,
    ) -> None:
        self.store = store
        self.thresholds = thresholds or PatternThresholds()
        self.cache = cache or PatternCache(ttl_seconds=self.thresholds.cache_ttl_seconds)

    async def get_patterns(self) -> list[Pattern]:
        """Patterns above the minimum confidence, refreshed when the cache is stale."""
        cached = self.cache.get()
        if cached is not None:
            return cached

        patterns = await self.store.list_patterns(min_confidence=self.thresholds.minimum)
        self.cache.set(patterns)
        logger.debug("[patterns] Cached %d patterns", len(patterns))
        return patterns

    async def find_matching_patterns(self, track: TrackContext, field: str) -> list[PatternMatch]:
        """Patterns that fill ``field`` and whose condition holds, best first."""
        matches: list[PatternMatch] = []
        for pattern in await self.get_patterns():
            if pattern.id is None or pattern.action.field != field:
                continue
            if not matches_condition(track, pattern.condition):
                continue
            value = apply_action(track, pattern.action)
            if not value:
                continue

            matches.append(
                PatternMatch(
                    pattern_id=pattern.id,
                    value=value,
                    confidence=pattern.confidence,
                    reasoning=pattern.reasoning or generate_reasoning(pattern),
                    pattern_type=pattern.pattern_type,
                    times_applied=pattern.times_applied,
                    times_confirmed=pattern.times_confirmed,
                )
            )

        return sorted(matches, key=lambda m: m.confidence, reverse=True)

    async def apply_high_confidence_patterns(self, track: TrackContext) -> dict[str, PatternMatch]:
        """Auto-fill empty fields whose top pattern clears the auto-fill threshold.

        Returns:
            field -> the applied match. Each applied pattern's usage is incremented.
        """
        filled: dict[str, PatternMatch] = {}
        for field in AUTO_FILL_FIELDS:
            if has_content(track.get(field)):
                continue

            matches = await self.find_matching_patterns(track, field)
            if not matches or matches[0].confidence < self.thresholds.auto_fill:
                continue

            top_match = matches[0]
            filled[field] = top_match
            await self.store.increment_usage(top_match.pattern_id)

        if filled:
            self.cache.invalidate()
        return filled

    async def get_interactive_choices(self, track: TrackContext, field: str) -> InteractiveChoices:
        """Options for a field the engine is not sure enough to fill."""
        options: list[ChoiceOption] = [
            ChoiceOption(
                id=f"pattern_{match.pattern_id}",
                value=match.value,
                confidence=match.confidence,
                reasoning=match.reasoning,
                source=ChoiceSource.PATTERN,
                pattern_id=match.pattern_id,
            )
            for match in await self.find_matching_patterns(track, field)
            if match.confidence >= self.thresholds.minimum
        ]

        if field == "artist" and not any(option.value == "N/A" for option in options):
            options.append(
                ChoiceOption(
                    id="default_na",
                    value="N/A",
                    confidence=0.3,
                    reasoning="Production music typically does not have a traditional artist",
                    source=ChoiceSource.DEFAULT,
                )
            )

        options.append(
            ChoiceOption(
                id="leave_empty",
                value=None,
                confidence=0,
                reasoning="Leave empty for manual entry later",
                source=ChoiceSource.USER_CHOICE,
            )
        )
        options.append(
            ChoiceOption(
                id="custom",
                value=CUSTOM_VALUE,
                confidence=0,
                reasoning="Enter a custom value",
                source=ChoiceSource.USER_CHOICE,
            )
        )

        top = options[0]
        return InteractiveChoices(
            field=field,
            track=track,
            options=options,
            top_confidence=top.confidence,
            requires_choice=top.confidence < self.thresholds.auto_fill,
            has_suggestion=top.source == ChoiceSource.PATTERN and top.confidence >= self.thresholds.suggest,
        )

    async def get_batch_interactive_choices(
        self,
        tracks: list[TrackContext],
        field: str,
    ) -> list[BatchChoiceGroup]:
        """Choices per (library, track type) group, computed on the group's first track."""
        groups: dict[str, list[TrackContext]] = {}
        for track in tracks:
            context_key = f"{track.library or 'unknown'}_{track.track_type or 'unknown'}"
            groups.setdefault(context_key, []).append(track)

        batch: list[BatchChoiceGroup] = []
        for context_key, group_tracks in groups.items():
            choices = await self.get_interactive_choices(group_tracks[0], field)
            batch.append(
                BatchChoiceGroup(
                    **choices.model_dump(),
                    tracks=[TrackContext(id=t.id, track_name=t.track_name) for t in group_tracks],
                    track_count=len(group_tracks),
                    context_key=context_key,
                )
            )
        return batch

    async def record_user_choice(
        self,
        track: TrackContext,
        field: str,
        chosen: ChoiceOption,
        all_options: list[ChoiceOption] | None = None,
    ) -> Pattern | None:
        """Log a user's choice, confirm the chosen pattern and maybe learn a new one.

        Returns:
            The pattern created or strengthened from the user's history, if any.
        """
        from_suggestion = chosen.source in (ChoiceSource.PATTERN, ChoiceSource.DEFAULT)
        await self.store.record_action(
            UserAction(
                action_type=UserActionType.SELECT_OPTION if from_suggestion else UserActionType.CELL_EDIT,
                track_context=track,
                field=field,
                old_value=track.get(field),
                new_value=chosen.value,
                from_suggestion=from_suggestion,
                suggestion_options=(all_options or [])[:5],
                pattern_id=chosen.pattern_id,
                confidence_at_action=chosen.confidence,
            )
        )

        if chosen.pattern_id:
            updated = await self.store.adjust_confidence(
                chosen.pattern_id,
                self.thresholds.confirm_step,
                maximum=self.thresholds.confirm_cap,
                counter="times_confirmed",
            )
            if updated is not None:
                logger.info(
                    "[patterns] Confirmed pattern %s, confidence now %.2f",
                    chosen.pattern_id,
                    updated.confidence,
                )
        self.cache.invalidate()

        return await self.maybe_create_pattern(track, field, chosen.value)

    async def record_pattern_override(
        self,
        track: TrackContext,
        field: str,
        pattern_id: str,
        old_value: str | None,
        new_value: str | None,
    ) -> Pattern | None:
        """Log that a user replaced a pattern-filled value and lower the pattern's confidence."""
        await self.store.record_action(
            UserAction(
                action_type=UserActionType.OVERRIDE_PATTERN,
                track_context=track,
                field=field,
                old_value=old_value,
                new_value=new_value,
                pattern_id=pattern_id,
            )
        )
        updated = await self.store.adjust_confidence(
            pattern_id,
            -self.thresholds.override_step,
            minimum=self.thresholds.override_floor,
            counter="times_overridden",
        )
        self.cache.invalidate()

        if updated is not None:
            logger.info(
                "[patterns] Pattern %s overridden, confidence now %.2f",
                pattern_id,
                updated.confidence,
            )
        return updated

    async def maybe_create_pattern(
        self,
        track: TrackContext,
        field: str,
        value: str | None,
    ) -> Pattern | None:
        """Learn a pattern once enough recent actions set ``field`` to ``value`` in a similar context."""
        if not value or value == CUSTOM_VALUE:
            return None
        if not (track.library or track.track_type):
            return None

        recent = await self.store.recent_actions(
            field, value, limit=self.thresholds.recent_action_window
        )
        if len(recent) < self.thresholds.min_consistent_actions:
            return None

        similar_count = sum(
            1
            for action in recent
            if (track.library and action.track_context.library == track.library)
            or (track.track_type and action.track_context.track_type == track.track_type)
        )
        if similar_count < self.thresholds.min_consistent_actions:
            return None

        return await self.create_or_strengthen_pattern(track, field, value, similar_count)

    async def create_or_strengthen_pattern(
        self,
        track: TrackContext,
        field: str,
        value: str,
        action_count: int,
    ) -> Pattern | None:
        """Strengthen the pattern for this context, or create it with a seed confidence."""
        condition: dict[str, str] = {}
        if track.library:
            condition["library_contains"] = extract_library_keyword(track.library)
        elif track.track_type:
            condition["track_type"] = track.track_type
        elif track.catalog_code:
            prefix = re.sub(r"\d+$", "", track.catalog_code)
            if len(prefix) >= 2:
                condition["catalog_code_prefix"] = prefix

        if not condition:
            return None

        seed = min(
            self.thresholds.seed_cap,
            self.thresholds.seed_base + self.thresholds.seed_per_action * action_count,
        )
        candidate = Pattern(
            pattern_type=determine_pattern_type(condition),
            condition=condition,
            action=PatternAction(field=field, value=value),
            confidence=seed,
            reasoning=(
                f"Learned from {action_count} consistent user actions: when {condition}, "
                f'set {field} to "{value}"'
            ),
        )

        existing = await self.store.find_pattern(candidate)
        if existing is not None and existing.id is not None:
            result = await self.store.adjust_confidence(
                existing.id,
                self.thresholds.strengthen_step,
                maximum=self.thresholds.strengthen_cap,
                counter="times_confirmed",
            )
            if result is not None:
                logger.info("[patterns] Strengthened pattern %s to %.2f", existing.id, result.confidence)
        else:
            result = await self.store.upsert_pattern(candidate)
            logger.info("[patterns] Created pattern %s with confidence %.2f", result.id, result.confidence)

        self.cache.invalidate()
        return result

    async def get_all_patterns(self) -> list[Pattern]:
        """Every stored pattern regardless of confidence, best first."""
        return await self.store.list_patterns(min_confidence=0.0)

    async def delete_pattern(self, pattern_id: str) -> bool:
        deleted = await self.store.delete_pattern(pattern_id)
        self.cache.invalidate()
        return deleted

    async def update_pattern_confidence(self, pattern_id: str, confidence: float) -> bool:
        """Set a pattern's confidence, clamped to [0, 1]."""
        updated = await self.store.set_confidence(pattern_id, max(0.0, min(1.0, confidence)))
        self.cache.invalidate()
        return updated
