"""The import pipeline: parse, categorize, time, group and enrich."""

from cue_importer.pipeline.config import ImportConfig, get_import_config
from cue_importer.pipeline.errors import ImportCancelledError
from cue_importer.pipeline.import_runner import PIPELINE_STEPS, ImportRunner, step_percent
from cue_importer.pipeline.report import summarize

__all__ = [
    "PIPELINE_STEPS",
    "ImportCancelledError",
    "ImportConfig",
    "ImportRunner",
    "get_import_config",
    "step_percent",
    "summarize",
]
