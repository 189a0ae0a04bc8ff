from cue_importer.common.base_cue_model import BaseCueModel


class FileMetadata(BaseCueModel):
    """Tags read from an audio file."""

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    composer: str | None = None
    publisher: str | None = None
