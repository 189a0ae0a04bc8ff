"""Plain-text report of an import run."""

from cue_importer.pipeline.schemas import ImportResult


def summarize(result: ImportResult) -> str:
    """Render every stage summary and the final numbers as a text report."""
    final = result.final_summary
    lines = ["", "=" * 60, f"IMPORT PIPELINE SUMMARY: {final.project_name}", "=" * 60, ""]

    for summary in result.summaries:
        counts = summary.counts
        lines.append(summary.step_name)
        lines.append("-" * 40)
        lines.append(f"  Input: {summary.input_count} clips")
        lines.append(f"  Output: {summary.output_count} clips")

        if "main" in counts:
            lines.append(
                f"  Main: {counts['main']:g}, SFX: {counts.get('sfx', 0):g}, "
                f"Stems: {counts.get('stem', 0):g}"
            )
        if "enriched" in counts:
            lines.append(f"  Enriched: {counts['enriched']:g}")
        if "matched" in counts:
            lines.append(
                f"  Matched: {counts['matched']:g} ({counts.get('exact', 0):g} exact, "
                f"{counts.get('fuzzy', 0):g} fuzzy)"
            )
        if "BI" in counts:
            lines.append(
                f"  Types: BI={counts['BI']:g}, BV={counts.get('BV', 0):g}, VI={counts.get('VI', 0):g}"
            )
        if summary.skipped:
            lines.append(f"  Skipped: {summary.reason}")

        lines.append(f"  Time: {summary.elapsed_ms}ms")
        lines.append("")

    lines.extend(
        [
            "FINAL RESULTS",
            "=" * 40,
            f"  Total Cues: {final.total_cues}",
            f"  Main Cues: {final.main_cues}",
            f"  SFX Cues: {final.sfx_cues}",
            f"  With Composer: {final.with_composer}",
            f"  With Publisher: {final.with_publisher}",
            f"  Complete: {final.complete}",
            f"  Total Time: {final.total_elapsed_ms}ms",
        ]
    )
    return "\n".join(lines) + "\n"
