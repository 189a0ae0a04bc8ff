from cue_importer.common.base_cue_model import BaseCueModel


class LearnedTrack(BaseCueModel):
    """A track previously approved into the learned database."""

    track_name: str
    catalog_code: str | None = None
    composer: str | None = None
    publisher: str | None = None
    library: str | None = None
    artist: str | None = None


class TrackMatch(BaseCueModel):
    """The best learned track for a cue and why it was chosen."""

    track: LearnedTrack
    confidence: float
    reason: str
