"""Path normalisation and project-name helpers."""

import logging
import re
from pathlib import Path
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)

SEARCH_DIRECTORIES = ("Desktop", "Downloads", "Documents")

SPOT_TITLE_SUFFIXES = ("_ace_wm", "_ace", "_wm", "_final", "_mix")


def normalize_file_path(input_path: str) -> str:
    """Turn dropped or network paths into local filesystem paths.

    ``file://`` URLs become their path, ``smb://server/share/x`` becomes
    ``/Volumes/share/x`` and percent-encoding is decoded.
    """
    normalized = input_path

    if normalized.startswith("file://"):
        normalized = urlparse(normalized).path

    if normalized.startswith("smb://"):
        normalized = "/Volumes" + urlparse(normalized).path
        logger.info("[parser] Converted SMB URL to: %s", normalized)

    return unquote(normalized)


def resolve_file_path(file_path: str | Path, home: Path | None = None) -> Path:
    """Normalise a path and, if it does not exist, look for the file in common folders.

    Args:
        file_path: The path as supplied by the caller.
        home: Home directory to search; defaults to the current user's.

    Returns:
        The first existing candidate, or the normalised path when nothing exists.
    """
    resolved = Path(normalize_file_path(str(file_path)))
    if resolved.is_absolute() and resolved.exists():
        return resolved

    search_home = home or Path.home()
    for directory in SEARCH_DIRECTORIES:
        candidate = search_home / directory / resolved.name
        if candidate.exists():
            logger.info("[parser] Found %s at %s", resolved.name, candidate)
            return candidate

    return resolved


def parse_spot_title(project_name: str) -> str:
    """Derive the spot title from a project file name.

    Examples:
        ``ACME_tv30_Big Game - v3`` -> ``Big Game``
        ``BRND_SPR_0412_Holiday_Rush_final`` -> ``Holiday_Rush``
    """
    name = project_name.split(" - ")[0].strip()

    for suffix in SPOT_TITLE_SUFFIXES:
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]

    tv_match = re.search(r"_tv\d+_(.+)$", name, re.IGNORECASE)
    if tv_match:
        return tv_match.group(1)

    edit_match = re.search(r"_edt_(.+)$", name, re.IGNORECASE)
    if edit_match:
        return edit_match.group(1)

    parts = name.split("_")
    if len(parts) >= 4:
        start_index = 0
        for index, part in enumerate(parts[:4]):
            if re.fullmatch(r"tv\d+", part, re.IGNORECASE):
                start_index = index + 1
                break
            if len(part) <= 4:
                start_index = index + 1
        if 0 < start_index < len(parts):
            return "_".join(parts[start_index:])

    return name
