"""Import runner that takes a project file through all eight pipeline steps."""

import asyncio
import inspect
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import NamedTuple

from cue_importer.categorizer import categorize_clips
from cue_importer.common.stage_summary import StageSummary
from cue_importer.durations import calculate_durations
from cue_importer.enrichment import (
    MetadataReader,
    MutagenMetadataReader,
    RemoteClassifier,
    TrackDatabase,
    apply_patterns,
    classify_low_confidence,
    detect_use_types,
    enrich_with_metadata,
    match_learned_db,
)
from cue_importer.enrichment.schemas import EnrichedCue
from cue_importer.pattern_engine import PatternEngine
from cue_importer.pipeline.config import ImportConfig, get_import_config
from cue_importer.pipeline.errors import ImportCancelledError
from cue_importer.pipeline.progress_reporter import ProgressReporter
from cue_importer.pipeline.schemas import (
    TOTAL_STEPS,
    FinalSummary,
    ImportResult,
    ImportStatus,
    ProgressEvent,
)
from cue_importer.project_parser import parse_project
from cue_importer.stem_grouper import group_stems
from cue_importer.stem_grouper.schemas import GroupedCue

logger = logging.getLogger(__name__)


class PipelineStep(NamedTuple):
    name: str
    description: str


PIPELINE_STEPS: tuple[PipelineStep, ...] = (
    PipelineStep("Parsing XML", "Reading project file..."),
    PipelineStep("Categorizing", "Classifying clips as Main/SFX/Stem..."),
    PipelineStep("Calculating Durations", "Converting timeline to durations..."),
    PipelineStep("Grouping Stems", "Linking stems to parent tracks..."),
    PipelineStep("Reading Metadata", "Extracting file metadata..."),
    PipelineStep("Matching Database", "Finding matches in learned database..."),
    PipelineStep("Applying Patterns", "Using learned patterns..."),
    PipelineStep("Detecting Use Types", "Determining BI/BV/VI usage..."),
)

ProgressCallback = Callable[[ProgressEvent], Awaitable[None] | None]


def step_percent(step_index: int, completed: bool) -> int:
    """Overall progress when a step starts or completes."""
    finished_steps = step_index if completed else step_index - 1
    return round(finished_steps / TOTAL_STEPS * 100)


class ImportRunner:
    """Orchestrates an import from project file to enriched cue list.

    Parsing runs in a worker thread; the pure stages run inline and the
    enrichment stages fan out per cue. Collaborators left as None make their
    stage report itself skipped, except the metadata reader which defaults
    to reading tags with mutagen.

    Args:
        import_id: Identifier used in progress messages and logs.
        config: Import settings; read from the environment when omitted.
        metadata_reader: Reads tags from referenced media files.
        track_database: The learned track database.
        pattern_engine: Fills fields from learned patterns.
        remote_classifier: Second opinion for low-confidence cues.
        progress_callback: Called with every progress event, sync or async.
        cancel_event: Set to stop the import at the next stage boundary.
        reporter: Broadcasts progress over websockets.
    """

    def __init__(
        self,
        import_id: str | None = None,
        config: ImportConfig | None = None,
        *,
        metadata_reader: MetadataReader | None = None,
        track_database: TrackDatabase | None = None,
        pattern_engine: PatternEngine | None = None,
        remote_classifier: RemoteClassifier | None = None,
        progress_callback: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
        reporter: ProgressReporter | None = None,
    ) -> None:
        self.import_id = import_id or uuid.uuid4().hex
        self.config = config or get_import_config()
        self.metadata_reader = metadata_reader or MutagenMetadataReader()
        self.track_database = track_database
        self.pattern_engine = pattern_engine
        self.remote_classifier = remote_classifier
        self.progress_callback = progress_callback
        self.cancel_event = cancel_event or asyncio.Event()
        self.reporter = reporter or ProgressReporter(self.import_id)

    def cancel(self) -> None:
        """Request cancellation; takes effect at the next stage boundary."""
        self.cancel_event.set()

    async def run(self, file_path: str | Path) -> ImportResult:
        """Run the pipeline on one project file.

        Raises:
            ProjectFileNotFoundError: The project file cannot be read.
            ProjectDecodeError: The project file is not gzip XML.
            ImportCancelledError: The import was cancelled.
        """
        logger.info("[import=%s] Starting import of %s", self.import_id, file_path)
        try:
            result = await self._run(file_path)
        except ImportCancelledError as e:
            logger.info("[import=%s] Import cancelled", self.import_id)
            await self.reporter.send_error(str(e), status=ImportStatus.CANCELLED)
            raise
        except Exception as e:
            logger.exception("[import=%s] Import failed with error", self.import_id)
            await self.reporter.send_error(f"{type(e).__name__}: {e}")
            raise

        await self.reporter.send_complete(result)
        logger.info(
            "[import=%s] Import completed: %d cues, %d excluded in %dms",
            self.import_id,
            len(result.cues),
            len(result.excluded),
            result.total_elapsed_ms,
        )
        return result

    async def _run(self, file_path: str | Path) -> ImportResult:
        started = time.perf_counter()
        config = self.config
        summaries: list[StageSummary] = []
        loop = asyncio.get_running_loop()

        # Step 1: Parse the project container
        await self._start_step(1)
        parsed = await loop.run_in_executor(None, parse_project, file_path)
        summaries.append(
            StageSummary(
                step_name=PIPELINE_STEPS[0].name,
                input_count=parsed.placement_count,
                output_count=len(parsed.clips),
                elapsed_ms=parsed.elapsed_ms,
                counts={
                    "placements": parsed.placement_count,
                    "unresolved_placements": parsed.unresolved_placement_count,
                    "skipped_values": parsed.skipped_value_count,
                    "media_files": parsed.media_file_count,
                },
                samples=[clip.original_name for clip in parsed.clips[:3]],
            )
        )
        await self._complete_step(1, len(parsed.clips))

        # Step 2: Categorize
        await self._start_step(2)
        categorized = categorize_clips(parsed.clips, config.categorizer)
        summaries.append(categorized.summary)
        await self._complete_step(2, len(categorized.clips))

        # Step 3: Durations
        await self._start_step(3)
        timed, durations_summary = calculate_durations(categorized.clips, config.fps)
        summaries.append(durations_summary)
        await self._complete_step(3, len(timed))

        # Step 4: Group stems
        await self._start_step(4)
        grouped, grouping_summary = group_stems(timed, config.fps)
        summaries.append(grouping_summary)
        await self._complete_step(4, len(grouped))

        cues = [EnrichedCue.from_grouped(cue) for cue in grouped]
        excluded_timed, _ = calculate_durations(categorized.excluded, config.fps)
        excluded = [
            EnrichedCue.from_grouped(GroupedCue(**clip.model_dump())) for clip in excluded_timed
        ]

        # Step 5: File metadata
        await self._start_step(5)
        cues, metadata_summary = await enrich_with_metadata(
            cues,
            parsed.file_paths,
            self.metadata_reader,
            concurrency=config.enrichment_concurrency,
            timeout=config.lookup_timeout_seconds,
        )
        summaries.append(metadata_summary)
        await self._complete_step(5, int(metadata_summary.counts.get("enriched", 0)))

        # Step 6: Learned database
        await self._start_step(6)
        cues, learned_summary = await match_learned_db(
            cues,
            self.track_database,
            concurrency=config.enrichment_concurrency,
            timeout=config.lookup_timeout_seconds,
        )
        summaries.append(learned_summary)
        await self._complete_step(6, int(learned_summary.counts.get("matched", 0)))

        # Step 7: Patterns, then the remote classifier for what is still uncertain
        await self._start_step(7)
        cues, patterns_summary = await apply_patterns(
            cues,
            self.pattern_engine,
            concurrency=config.enrichment_concurrency,
            timeout=config.lookup_timeout_seconds,
        )
        summaries.append(patterns_summary)
        cues, remote_excluded, remote_summary = await classify_low_confidence(
            cues,
            self.remote_classifier,
            enabled=config.remote_classifier_enabled,
            timeout=config.remote_timeout_seconds,
        )
        summaries.append(remote_summary)
        excluded.extend(remote_excluded)
        await self._complete_step(7, int(patterns_summary.counts.get("applied", 0)))

        # Step 8: Use types
        await self._start_step(8)
        cues, use_type_summary = detect_use_types(cues)
        summaries.append(use_type_summary)
        await self._complete_step(8, len(cues))

        total_elapsed_ms = int((time.perf_counter() - started) * 1000)
        return ImportResult(
            import_id=self.import_id,
            project_name=parsed.project_name,
            spot_title=parsed.spot_title,
            file_path=parsed.file_path,
            cues=cues,
            excluded=excluded,
            summaries=summaries,
            final_summary=FinalSummary.from_cues(parsed.project_name, cues, total_elapsed_ms),
            total_elapsed_ms=total_elapsed_ms,
        )

    def _check_cancelled(self, step_index: int) -> None:
        if self.cancel_event.is_set():
            msg = f"Import {self.import_id} cancelled before step {step_index}"
            raise ImportCancelledError(msg)

    async def _start_step(self, step_index: int) -> None:
        self._check_cancelled(step_index)
        await self._emit(step_index, items_processed=0, completed=False)

    async def _complete_step(self, step_index: int, items_processed: int) -> None:
        await self._emit(step_index, items_processed=items_processed, completed=True)

    async def _emit(self, step_index: int, items_processed: int, completed: bool) -> None:
        step = PIPELINE_STEPS[step_index - 1]
        event = ProgressEvent(
            import_id=self.import_id,
            step_index=step_index,
            step_name=step.name,
            description=step.description,
            percent_complete=step_percent(step_index, completed),
            items_processed=items_processed,
            completed=completed,
        )
        if self.progress_callback is not None:
            outcome = self.progress_callback(event)
            if inspect.isawaitable(outcome):
                await outcome
        await self.reporter.send_progress(event)
