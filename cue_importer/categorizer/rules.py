"""Name patterns that decide a clip's cue type before and after classification.

Token boundaries treat ``_`` as a separator, since editors join words with
underscores (``Interview_CAM1``) where ``\\b`` would see one word.
"""

import re

FREE_SFX_MARKER = "CPSFX"


def _token(pattern: str, trailing: bool = True) -> re.Pattern[str]:
    suffix = r"(?![A-Za-z0-9])" if trailing else ""
    return re.compile(rf"(?<![A-Za-z0-9])(?:{pattern}){suffix}", re.IGNORECASE)


# Camera audio, interviews, production audio, ADR and temp recordings
NON_MUSIC_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("camera_audio", _token(r"CAM\s*\d", trailing=False)),
    ("resolution_tag", _token(r"Res\.\s*\d+", trailing=False)),
    ("dated_recording", re.compile(r"\d{2}\.\d{2}\.\d{4}")),
    ("awm", _token("AWM")),
    ("podcast", _token("Podcast")),
    ("interview", _token("Interview")),
    ("voiceover", _token(r"VO[-_\s]", trailing=False)),
    ("dialogue", _token("Dialogue")),
    ("narration", _token("Narration")),
    ("room_tone", _token(r"Room[\s_]*Tone")),
    ("ambience", _token("Ambience")),
    ("location_audio", _token(r"Location[\s_]*Audio")),
    ("production_audio", _token(r"Production[\s_]*Audio")),
    ("adr", _token(r"ADR[\s_]", trailing=False)),
    ("temp_adr", _token(r"Temp[\s_]*ADR")),
    ("ai_adr", _token(r"AI[\s_]*ADR")),
    ("talent_vo", _token(r"TALENT[\s_]*VO")),
]

SFX_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("sfx_tag", _token("sfx|fx")),
    ("impact", _token("hit|impact|whoosh|riser|drop|swell|stinger|sting|boom|crash")),
    ("transition", _token("transition|swoosh|swipe|glitch|noise|drone")),
    ("sfx_suffix", re.compile(r"_(fx|sfx|hit|sting|whoosh|impact)$", re.IGNORECASE)),
    ("sfx_prefix", re.compile(r"^(fx|sfx)_", re.IGNORECASE)),
    ("trailer_fx", _token(r"trailer\s*fx|cinematic\s*hit")),
]


def is_free_sfx(name: str) -> bool:
    return FREE_SFX_MARKER in name


def match_non_music(name: str) -> str | None:
    """Return the name of the first non-music pattern found in ``name``."""
    for pattern_name, pattern in NON_MUSIC_PATTERNS:
        if pattern.search(name):
            return pattern_name
    return None


def match_sfx(original_name: str, display_name: str) -> str | None:
    """Return the name of the first SFX pattern found in either name."""
    name_to_check = f"{original_name} {display_name}".lower()
    for pattern_name, pattern in SFX_PATTERNS:
        if pattern.search(name_to_check):
            return pattern_name
    return None
