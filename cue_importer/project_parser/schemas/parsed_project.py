"""Result of reading a project container."""

from pydantic import Field

from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.project_parser.schemas.raw_clip import RawClip


class ParsedProject(BaseCueModel):
    """Clips, media paths and naming information from one project file."""

    file_path: str
    project_name: str
    spot_title: str
    clips: list[RawClip] = Field(default_factory=list)

    # filename (with and without extension) -> absolute media path
    file_paths: dict[str, str] = Field(default_factory=dict)

    placement_count: int = 0
    unresolved_placement_count: int = 0
    skipped_value_count: int = 0
    elapsed_ms: int = 0

    @property
    def media_file_count(self) -> int:
        """Number of distinct media files (each is keyed twice)."""
        return len(set(self.file_paths.values()))
