"""Match cues against tracks approved in earlier imports."""

import asyncio
import logging
import re
import time
from collections import Counter

from cue_importer.common.stage_summary import StageSummary
from cue_importer.enrichment.concurrency import DEFAULT_CONCURRENCY, map_bounded
from cue_importer.enrichment.protocols import TrackDatabase
from cue_importer.enrichment.schemas import (
    EnrichedCue,
    EnrichedField,
    LearnedTrack,
    ProvenanceSource,
    TrackMatch,
)

logger = logging.getLogger(__name__)

STEP_NAME = "Matching Database"

NAME_QUERY_LIMIT = 50
CATALOG_QUERY_LIMIT = 20

MIN_SIMILARITY = 0.6
MIN_MATCH_CONFIDENCE = 0.7
EXACT_MATCH_CONFIDENCE = 1.0
CATALOG_MATCH_CONFIDENCE = 0.95

VENDOR_PREFIX_PATTERN = re.compile(r"^(BYND-|mx.*?_|mx_?BMGPM_)", re.IGNORECASE)
CATALOG_CODE_PATTERN = re.compile(r"\b([A-Z]{2,}\d{2,})\b", re.IGNORECASE)
INLINE_CATALOG_PATTERN = re.compile(r"\b[A-Z]{2,}\d{2,}\b")
MIX_QUALIFIER_PATTERN = re.compile(r"\s*(STEM|MIX|FULL|ALT).*$", re.IGNORECASE)

STOP_WORDS = frozenset({"bmgpm", "bmg", "apm", "production", "music"})


def clean_track_name(name: str) -> str:
    """Normalise a track name for comparison.

    Vendor prefixes, catalog codes and mix qualifiers are removed, underscores
    become spaces and the result is lowercased.
    """
    cleaned = VENDOR_PREFIX_PATTERN.sub("", name)
    cleaned = INLINE_CATALOG_PATTERN.sub("", cleaned)
    cleaned = cleaned.replace("_", " ")
    cleaned = MIX_QUALIFIER_PATTERN.sub("", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip().lower()


def extract_catalog_code(name: str) -> str | None:
    match = CATALOG_CODE_PATTERN.search(name)
    return match.group(1).upper() if match else None


def _resolve_catalog_code(track_name: str, known_code: str | None) -> str | None:
    code = extract_catalog_code(track_name) or known_code
    return code.upper() if code else None


def _trigrams(text: str) -> set[str]:
    return {text[i : i + 3] for i in range(len(text) - 2)}


def calculate_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the two strings' character trigrams."""
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    trigrams_a = _trigrams(a)
    trigrams_b = _trigrams(b)
    union = trigrams_a | trigrams_b
    if not union:
        return 0.0
    return len(trigrams_a & trigrams_b) / len(union)


def significant_words(cleaned_name: str) -> list[str]:
    return [word for word in cleaned_name.split() if len(word) > 2 and word not in STOP_WORDS]


def score_candidate(
    cleaned_name: str, catalog_code: str | None, candidate: LearnedTrack
) -> TrackMatch | None:
    """Score one learned track against a cleaned cue name."""
    candidate_name = clean_track_name(candidate.track_name)
    candidate_code = candidate.catalog_code or extract_catalog_code(candidate.track_name)
    if candidate_name == cleaned_name:
        return TrackMatch(
            track=candidate,
            confidence=EXACT_MATCH_CONFIDENCE,
            reason="Exact track name match",
        )

    if catalog_code and candidate_code and candidate_code.upper() == catalog_code:
        return TrackMatch(
            track=candidate,
            confidence=CATALOG_MATCH_CONFIDENCE,
            reason=f"Same catalog code ({catalog_code})",
        )

    similarity = calculate_similarity(cleaned_name, candidate_name)
    if similarity >= MIN_SIMILARITY:
        return TrackMatch(
            track=candidate,
            confidence=0.5 + similarity * 0.45,
            reason=f"{round(similarity * 100)}% similar name",
        )
    return None


def find_best_match(
    track_name: str, candidates: list[LearnedTrack], catalog_code: str | None = None
) -> TrackMatch | None:
    """The best scoring candidate, if it reaches the acceptance threshold.

    A catalog code inside ``track_name`` wins over the ``catalog_code`` the
    filename classifier found.
    """
    cleaned_name = clean_track_name(track_name)
    catalog_code = _resolve_catalog_code(track_name, catalog_code)

    best: TrackMatch | None = None
    for candidate in candidates:
        scored = score_candidate(cleaned_name, catalog_code, candidate)
        if scored is not None and (best is None or scored.confidence > best.confidence):
            best = scored

    if best is None or best.confidence < MIN_MATCH_CONFIDENCE:
        return None
    return best


async def lookup_track(
    database: TrackDatabase, track_name: str, catalog_code: str | None = None
) -> TrackMatch | None:
    """Query by the first significant word, falling back to the catalog code."""
    cleaned_name = clean_track_name(track_name)
    catalog_code = _resolve_catalog_code(track_name, catalog_code)

    words = significant_words(cleaned_name)
    if not words and not catalog_code:
        return None

    candidates: list[LearnedTrack] = []
    if words:
        candidates = await database.query(words[0], NAME_QUERY_LIMIT)
    if not candidates and catalog_code:
        candidates = await database.query(catalog_code, CATALOG_QUERY_LIMIT)

    return find_best_match(track_name, candidates, catalog_code)


def apply_track_match(cue: EnrichedCue, match: TrackMatch) -> EnrichedCue:
    reason = f"Learned database: {match.reason}"
    enriched = cue.with_field(
        EnrichedField.COMPOSER,
        match.track.composer,
        ProvenanceSource.LEARNED_DB,
        match.confidence,
        reason=reason,
    )
    enriched = enriched.with_field(
        EnrichedField.PUBLISHER,
        match.track.publisher,
        ProvenanceSource.LEARNED_DB,
        match.confidence,
        reason=reason,
    )
    return enriched.model_copy(
        update={
            "matched_track": match.track.track_name,
            "match_confidence": match.confidence,
            "match_reason": match.reason,
        }
    )


async def match_learned_db(
    cues: list[EnrichedCue],
    database: TrackDatabase | None,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: float = 10.0,
) -> tuple[list[EnrichedCue], StageSummary]:
    """Fill composer and publisher from the best learned track for each cue.

    Lookup failures and timeouts leave the cue unchanged and are counted as
    ``failed``.
    """
    started = time.perf_counter()
    if database is None:
        return cues, StageSummary(
            step_name=STEP_NAME,
            input_count=len(cues),
            output_count=len(cues),
            skipped=True,
            reason="no track database configured",
        )

    async def match_one(cue: EnrichedCue) -> tuple[EnrichedCue, str]:
        try:
            match = await asyncio.wait_for(
                lookup_track(database, cue.display_name, cue.catalog_code), timeout=timeout
            )
        except Exception as e:
            logger.warning("[learned-db] Lookup failed for %r: %s", cue.display_name, e)
            return cue, "failed"
        if match is None:
            return cue, "unmatched"
        status = "exact" if match.confidence == EXACT_MATCH_CONFIDENCE else "fuzzy"
        return apply_track_match(cue, match), status

    results = await map_bounded(cues, match_one, concurrency)
    matched = [cue for cue, _ in results]
    statuses = Counter(status for _, status in results)

    logger.info(
        "[learned-db] %d exact, %d fuzzy, %d unmatched, %d failed",
        statuses["exact"],
        statuses["fuzzy"],
        statuses["unmatched"],
        statuses["failed"],
    )

    return matched, StageSummary(
        step_name=STEP_NAME,
        input_count=len(cues),
        output_count=len(matched),
        elapsed_ms=int((time.perf_counter() - started) * 1000),
        counts={
            "matched": statuses["exact"] + statuses["fuzzy"],
            "exact": statuses["exact"],
            "fuzzy": statuses["fuzzy"],
            "unmatched": statuses["unmatched"],
            "failed": statuses["failed"],
        },
        samples=[
            f"{cue.display_name} -> {cue.matched_track} ({cue.match_reason})"
            for cue in matched
            if cue.matched_track
        ][:3],
    )
