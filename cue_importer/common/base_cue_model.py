from pydantic import BaseModel, ConfigDict


class BaseCueModel(BaseModel):
    """Base Pydantic model for the cue importer.

    Records are immutable; pipeline stages return updated copies instead of
    mutating what an earlier stage produced.
    """

    model_config = ConfigDict(
        frozen=True,
        revalidate_instances="always",
        validate_assignment=True,
        populate_by_name=True,
    )
