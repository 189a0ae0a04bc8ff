"""The view of a cue that patterns are matched against."""

from cue_importer.common.base_cue_model import BaseCueModel


class TrackContext(BaseCueModel):
    """Track attributes available to pattern conditions and actions.

    ``track_type`` is the cue type (main, sfx, stem).
    """

    id: str | None = None
    track_name: str | None = None
    track_type: str | None = None
    library: str | None = None
    catalog_code: str | None = None
    source: str | None = None
    artist: str | None = None
    label: str | None = None
    composer: str | None = None
    publisher: str | None = None

    def get(self, key: str) -> str | None:
        """Return a context attribute by name, or None if unknown."""
        if key not in type(self).model_fields:
            return None
        return getattr(self, key)
