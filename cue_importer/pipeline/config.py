"""Import pipeline configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field

from cue_importer.categorizer.schemas import CategorizerThresholds
from cue_importer.common.base_cue_model import BaseCueModel
from cue_importer.common.openai_model_identifier import OpenAIModelIdentifier
from cue_importer.pattern_engine.schemas import PatternThresholds
from cue_importer.timecode import DEFAULT_FPS

# Load .env file from the project root
_project_dir = Path(__file__).parent.parent.parent
load_dotenv(_project_dir / ".env")

TRUE_VALUES = {"1", "true", "yes", "on"}


class ImportConfig(BaseCueModel):
    """Settings for one import run."""

    fps: float = Field(default=DEFAULT_FPS, gt=0)

    # Remote classifier
    remote_classifier_enabled: bool = False
    remote_model: OpenAIModelIdentifier = OpenAIModelIdentifier.GPT_5_MINI
    remote_timeout_seconds: float = Field(default=30.0, gt=0)

    # Per-clip lookups (file tags, learned database, patterns)
    lookup_timeout_seconds: float = Field(default=10.0, gt=0)
    enrichment_concurrency: int = Field(default=8, ge=1)

    categorizer: CategorizerThresholds = Field(default_factory=CategorizerThresholds)
    patterns: PatternThresholds = Field(default_factory=PatternThresholds)


def get_import_config() -> ImportConfig:
    """Get import configuration from environment variables.

    Environment variables:
        CUE_IMPORTER_FPS: Timeline frame rate (default: 23.976)
        CUE_IMPORTER_REMOTE_CLASSIFIER_ENABLED: Send low-confidence cues to the LLM classifier
        CUE_IMPORTER_REMOTE_MODEL: Model identifier for the classifier agent
        CUE_IMPORTER_REMOTE_TIMEOUT_SECONDS: Timeout for the classifier call
        CUE_IMPORTER_LOOKUP_TIMEOUT_SECONDS: Timeout for each per-clip lookup
        CUE_IMPORTER_ENRICHMENT_CONCURRENCY: Maximum concurrent per-clip lookups
    """
    defaults = ImportConfig()
    return ImportConfig(
        fps=float(os.environ.get("CUE_IMPORTER_FPS", defaults.fps)),
        remote_classifier_enabled=(
            os.environ.get("CUE_IMPORTER_REMOTE_CLASSIFIER_ENABLED", "").strip().lower() in TRUE_VALUES
        ),
        remote_model=OpenAIModelIdentifier(
            os.environ.get("CUE_IMPORTER_REMOTE_MODEL", defaults.remote_model.value)
        ),
        remote_timeout_seconds=float(
            os.environ.get("CUE_IMPORTER_REMOTE_TIMEOUT_SECONDS", defaults.remote_timeout_seconds)
        ),
        lookup_timeout_seconds=float(
            os.environ.get("CUE_IMPORTER_LOOKUP_TIMEOUT_SECONDS", defaults.lookup_timeout_seconds)
        ),
        enrichment_concurrency=int(
            os.environ.get("CUE_IMPORTER_ENRICHMENT_CONCURRENCY", defaults.enrichment_concurrency)
        ),
    )
