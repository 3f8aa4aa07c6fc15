#!/usr/bin/env python3
"""
Questionnaire Report command line

Usage:
    questionnaire-report expand                 # inline value sets into ./questionnaires
    questionnaire-report run                    # expand, then write one payload per input file
    questionnaire-report run --input data/in --output data/out --verbose
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import base_settings, logging_settings
from .config.fhir_config import DuplicateUrlPolicy
from .pipeline import ReportPipeline
from .report.renderer import JsonReportWriter
from .utils.exceptions import ConfigurationError, DefinitionsDirectoryError, DuplicateCanonicalUrlError
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="questionnaire-report",
        description="Prepare FHIR QuestionnaireResponse data for report rendering",
    )
    parser.add_argument("--definitions", type=Path, default=None,
                        help=f"Definitions directory (default: {base_settings.DEFINITIONS_DIR})")
    parser.add_argument("--duplicate-policy", choices=[p.value for p in DuplicateUrlPolicy], default=None,
                        help="How to handle two definitions with the same canonical URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("expand", help="Expand value sets in the definitions directory in place")

    run_parser = subparsers.add_parser("run", help="Expand definitions and render every input file")
    run_parser.add_argument("--input", type=Path, default=None,
                            help=f"Input directory (default: {base_settings.INPUT_DIR})")
    run_parser.add_argument("--output", type=Path, default=None,
                            help=f"Output directory (default: {base_settings.OUTPUT_DIR})")
    run_parser.add_argument("--keep-output", action="store_true",
                            help="Do not clean the output directory first")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = "DEBUG" if args.verbose else logging_settings.LOG_LEVEL
    policy = DuplicateUrlPolicy(args.duplicate_policy) if args.duplicate_policy else None

    try:
        pipeline = ReportPipeline(
            definitions_dir=args.definitions,
            input_dir=getattr(args, "input", None),
            output_dir=getattr(args, "output", None),
            policy=policy,
            clean_output=False if getattr(args, "keep_output", False) else None,
        )
    except ConfigurationError as e:
        setup_logging(level, format_json=logging_settings.LOG_JSON)
        logger.error(str(e))
        return 1

    if args.command == "run":
        pipeline.prepare_output()
        setup_logging(
            level,
            log_file=pipeline.output_dir / logging_settings.LOG_FILE_NAME,
            format_json=logging_settings.LOG_JSON,
        )
    else:
        setup_logging(level, format_json=logging_settings.LOG_JSON)

    try:
        pipeline.prepare_definitions()
    except (DefinitionsDirectoryError, DuplicateCanonicalUrlError) as e:
        logger.error(str(e))
        return 1

    if args.command == "expand":
        return 0

    renderer = JsonReportWriter()
    try:
        summary = pipeline.run(renderer)
    finally:
        renderer.close()

    logger.info(
        f"All done! {len(summary.rendered)}/{summary.processed} input files rendered. "
        f"Check {pipeline.output_dir / logging_settings.LOG_FILE_NAME} for details."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
