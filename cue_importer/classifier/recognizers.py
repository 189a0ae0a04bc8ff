"""Ordered recognizers for vendor and library filename conventions.

Each recognizer is a (name, regex, extractor) entry in ``RECOGNIZERS``. The
table is tried top to bottom and the first match wins, so stem conventions sit
above the plain conventions they would otherwise be mistaken for. Names that no
recognizer claims fall through to ``generic_match``.
"""

import re
from collections.abc import Callable
from typing import NamedTuple

from cue_importer.classifier.schemas import FilenameMatch

AUDIO_EXTENSION_PATTERN = re.compile(r"\.(wav|aif|aiff|mp3|m4a|flac)$", re.IGNORECASE)

BMG_LIBRARY = "BMG Production Music"

# BMG catalog code -> album name
BMG_CATALOG_MAP: dict[str, str] = {
    "IATS021": "Ka-Pow",
    "IATS": "Ka-Pow",
    "BYND": "FX _ Trailer FX I (BYND001)",
    "BYND001": "FX _ Trailer FX I (BYND001)",
}

STEM_FILE_PATTERNS = [
    re.compile(r"_Stems?$", re.IGNORECASE),
    re.compile(r"_STEM_", re.IGNORECASE),
    re.compile(r"\sSTEM\s", re.IGNORECASE),
]

CATALOG_SHAPE_PATTERN = re.compile(r"[A-Z]{2,4}\d{2,4}", re.IGNORECASE)
VENDOR_PREFIX_PATTERN = re.compile(r"^mx_", re.IGNORECASE)

RECOGNIZED_CONFIDENCE = 0.95
ARTIST_STEM_CONFIDENCE = 0.90
GENERIC_CONFIDENCE = 0.50
GENERIC_VENDOR_CONFIDENCE = 0.70
GENERIC_CATALOG_CONFIDENCE = 0.75


class Recognizer(NamedTuple):
    """A single naming convention: a pattern plus how to read its groups."""

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str]], FilenameMatch]


def strip_audio_extension(filename: str) -> str:
    """Remove a trailing audio extension, if any."""
    return AUDIO_EXTENSION_PATTERN.sub("", filename)


def _title(raw: str) -> str:
    return raw.replace("_", " ").strip()


def _bmg_stem(match: re.Match[str]) -> FilenameMatch:
    catalog_code = match.group(2)
    track_name = _title(match.group(3))
    return FilenameMatch(
        base_track_name=track_name.lower(),
        display_name=track_name,
        library=BMG_LIBRARY,
        catalog_code=catalog_code,
        source=BMG_CATALOG_MAP.get(catalog_code, catalog_code),
        is_stem=True,
        stem_part=match.group(1),
        confidence=RECOGNIZED_CONFIDENCE,
        matched_pattern="bmg_stem",
    )


def _bsm_stem(pattern_name: str) -> Callable[[re.Match[str]], FilenameMatch]:
    def extract(match: re.Match[str]) -> FilenameMatch:
        song_title = re.sub(r"\s+v[\d.]+$", "", match.group(1).strip(), flags=re.IGNORECASE).strip()
        return FilenameMatch(
            base_track_name=song_title.lower(),
            display_name=song_title,
            library="BSM",
            is_stem=True,
            stem_part=match.group(2).strip(),
            confidence=RECOGNIZED_CONFIDENCE,
            matched_pattern=pattern_name,
        )

    return extract


def _artist_stem(match: re.Match[str]) -> FilenameMatch:
    song_title = match.group(2).strip()
    return FilenameMatch(
        base_track_name=song_title.lower(),
        display_name=song_title,
        artist=match.group(1).strip(),
        is_stem=True,
        stem_part=match.group(3).strip(),
        confidence=ARTIST_STEM_CONFIDENCE,
        matched_pattern="artist_stem",
    )


def _beyond(match: re.Match[str]) -> FilenameMatch:
    track_name = match.group(1).strip()
    return FilenameMatch(
        base_track_name=track_name.lower(),
        display_name=f"BYND-{track_name}",
        library=BMG_LIBRARY,
        catalog_code="BYND",
        source=BMG_CATALOG_MAP.get("BYND", "Beyond"),
        confidence=RECOGNIZED_CONFIDENCE,
        matched_pattern="beyond",
    )


def _bmg_standard(match: re.Match[str]) -> FilenameMatch:
    catalog_code = match.group(1)
    track_name = _title(match.group(2))
    return FilenameMatch(
        base_track_name=track_name.lower(),
        display_name=track_name,
        library=BMG_LIBRARY,
        catalog_code=catalog_code,
        source=BMG_CATALOG_MAP.get(catalog_code, catalog_code),
        confidence=RECOGNIZED_CONFIDENCE,
        matched_pattern="bmg_standard",
    )


def _catalog_recognizer(
    name: str,
    pattern: str,
    library: str,
    catalog_prefix: str,
    title_group: int,
) -> Recognizer:
    """Build a recognizer for ``<PREFIX><number> ... <title>`` conventions.

    The catalog code is the prefix joined to the first group; the source
    field carries the catalog code since the album is not encoded.
    """

    def extract(match: re.Match[str]) -> FilenameMatch:
        catalog_code = f"{catalog_prefix}{match.group(1)}"
        track_name = _title(match.group(title_group))
        return FilenameMatch(
            base_track_name=track_name.lower(),
            display_name=track_name,
            library=library,
            catalog_code=catalog_code,
            source=BMG_CATALOG_MAP.get(catalog_code, catalog_code),
            confidence=RECOGNIZED_CONFIDENCE,
            matched_pattern=name,
        )

    return Recognizer(name, re.compile(pattern, re.IGNORECASE), extract)


RECOGNIZERS: list[Recognizer] = [
    # BASS_mx_BMGPM_IATS021_Punch_Drunk_STEM_BASS
    Recognizer(
        "bmg_stem",
        re.compile(r"^([A-Z]+)_mx_BMGPM_([A-Z]+\d*)_(.+?)_STEM_", re.IGNORECASE),
        _bmg_stem,
    ),
    # mx_BSM_Step Into A World (Trailer Remix) v2.2_STEM_Bass + Pulse
    Recognizer(
        "bsm_stem",
        re.compile(r"^mx_BSM_(.+?)(?:\s+v[\d.]+)?_STEM_(.+)$", re.IGNORECASE),
        _bsm_stem("bsm_stem"),
    ),
    # BSM Step Into A World v2 STEM Drums
    Recognizer(
        "bsm_stem_alt",
        re.compile(r"^BSM\s+(.+?)\s+(?:v[\d.]+\s+)?STEM\s+(.+)$", re.IGNORECASE),
        _bsm_stem("bsm_stem_alt"),
    ),
    # mx_K.Flay - BloodInTheCut_BGVs4_Stems
    Recognizer(
        "artist_stem",
        re.compile(r"^mx_([^_]+)\s*-\s*([^_]+)_(.+?)_Stems?$", re.IGNORECASE),
        _artist_stem,
    ),
    # mxBeyond-Fire Thunder Hit
    Recognizer("beyond", re.compile(r"^mxBeyond-(.+)$", re.IGNORECASE), _beyond),
    # mx_BMGPM_IATS021_Punch_Drunk
    Recognizer(
        "bmg_standard",
        re.compile(r"^mx_?BMGPM_([A-Z]+\d*)_(.+)$", re.IGNORECASE),
        _bmg_standard,
    ),
    # mx_EVS_00131_069_Darkness Calls_Signature 2
    _catalog_recognizer("evolution", r"^mx_EVS_(\d+)_(\d+)_(.+)$", "Evolution", "EVS", 3),
    # GTW121_16 Decisive Power Smash Main
    _catalog_recognizer(
        "gothic_storm", r"^GTW(\d+)[_\s]+(\d+)\s+(.+?)\s*(?:Main)?$", "Gothic Storm", "GTW", 3
    ),
    # AMT05_740 Master Blaster
    _catalog_recognizer("audiomachine", r"^AMT(\d+)[_\s]+(\d+)\s+(.+)$", "Audiomachine", "AMT", 3),
    # Sencit ATv1 40 Tres Explosivos Swish Hit
    _catalog_recognizer("sencit", r"^Sencit\s+(\w+)\s+(\d+)\s+(.+)$", "Tenth Dimension", "Sencit ", 3),
    # Repeater EAv1 334 Three Killers Multi Knife Swing
    _catalog_recognizer("repeater", r"^Repeater\s+(\w+)\s+(\d+)\s+(.+)$", "REPEATER", "Repeater ", 3),
    # THH40 HAND TO HAND COMBAT 08 Tackle
    _catalog_recognizer(
        "hit_house", r"^THH(\d+)\s+(.+?)\s+(\d+)\s+(.+?)(?:\s+LVTD.*)?$", "The Hit House", "THH", 4
    ),
    # DAM208_054 Juicy Evil Dead Punch 1 HIT
    _catalog_recognizer(
        "dream_art_music",
        r"^DAM(\d+)[_\s]+(\d+)\s+(.+?)(?:\s+(?:HIT|LOW|PUNCH).*)?$",
        "Dream Art Music",
        "DAM",
        3,
    ),
    # BYND258_018 Flash Zoom Bys
    _catalog_recognizer("bynd_numbered", r"^BYND(\d+)[_\s]+(\d+)\s+(.+)$", BMG_LIBRARY, "BYND", 3),
]


def is_stem_filename(name_without_ext: str) -> bool:
    """Check the generic stem markers (``_Stems``, ``_STEM_``, `` STEM ``)."""
    return any(pattern.search(name_without_ext) for pattern in STEM_FILE_PATTERNS)


def generic_match(name_without_ext: str) -> FilenameMatch | None:
    """Clean an unrecognized name and score how music-like it looks."""
    clean_name = name_without_ext
    clean_name = re.sub(r"^mx_?", "", clean_name, flags=re.IGNORECASE)
    clean_name = re.sub(r"^SYNC\s+", "", clean_name, flags=re.IGNORECASE)
    clean_name = re.sub(r"_LVTD[\s_]*ClrMx$", "", clean_name, flags=re.IGNORECASE)
    clean_name = clean_name.replace("_", " ").strip()

    for suffix in (r"\s*Stems?$", r"\s+HiFi$", r"\s+Main$", r"\s+LVTD\s*ClrMx$"):
        clean_name = re.sub(suffix, "", clean_name, flags=re.IGNORECASE).strip()

    if not clean_name:
        return None

    confidence = GENERIC_CONFIDENCE
    matched_pattern = "generic"

    if VENDOR_PREFIX_PATTERN.search(name_without_ext):
        confidence = GENERIC_VENDOR_CONFIDENCE
        matched_pattern = "generic_mx"

    if CATALOG_SHAPE_PATTERN.search(name_without_ext):
        confidence = GENERIC_CATALOG_CONFIDENCE
        matched_pattern = "generic_catalog"

    return FilenameMatch(
        base_track_name=clean_name.lower(),
        display_name=clean_name,
        is_stem=is_stem_filename(name_without_ext),
        confidence=confidence,
        matched_pattern=matched_pattern,
    )


def classify_filename(filename: str) -> FilenameMatch | None:
    """Extract track information from an audio filename.

    Args:
        filename: The clip name, with or without an audio extension.

    Returns:
        The first recognizer's result, the generic fallback, or None when the
        name has nothing left after cleanup.
    """
    name_without_ext = strip_audio_extension(filename)

    for recognizer in RECOGNIZERS:
        match = recognizer.pattern.search(name_without_ext)
        if match:
            return recognizer.extract(match)

    return generic_match(name_without_ext)
