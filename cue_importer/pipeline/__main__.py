"""Run an import from the command line and print its report.

Usage: python -m cue_importer.pipeline <path_to_prproj> [--json]
"""

import asyncio
import logging
import sys
from pathlib import Path

from cue_importer.pipeline import ImportRunner, summarize
from cue_importer.project_parser import ProjectImportError


def main(argv: list[str]) -> int:
    args = [arg for arg in argv if not arg.startswith("--")]
    as_json = "--json" in argv
    if not args:
        print("Usage: python -m cue_importer.pipeline <path_to_prproj> [--json]")
        return 1

    logging.basicConfig(
        level=logging.WARNING if as_json else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        result = asyncio.run(ImportRunner().run(Path(args[0])))
    except ProjectImportError as e:
        print(str(e), file=sys.stderr)
        return 1

    if as_json:
        print(result.model_dump_json(indent=2))
    else:
        print(summarize(result))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
