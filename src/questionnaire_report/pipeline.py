# ============================================================================
# src/questionnaire_report/pipeline.py
# ============================================================================
"""
Report Pipeline

Sequential batch driver:
1. Load the definitional corpus and build the canonical index
2. Expand value sets in place and persist the definitions
3. Normalize each input file and hand its payload to the renderer

Input files are processed one at a time because renderers typically
drive a single shared session. A defect in one file is logged and the
batch moves on; only a missing definitions directory stops the run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import logging

from .config import base_settings, limit_settings
from .config.fhir_config import DuplicateUrlPolicy
from .core.canonical_index import CanonicalIndex
from .core.expansion import ExpansionReport, expand_definition_files
from .core.loader import LoadReport, load_definitions, load_resource_file
from .core.normalizer import BundleNormalizer
from .report.assembly import build_render_payload
from .report.renderer import BaseReportRenderer
from .utils.exceptions import ConfigurationError
from .utils.file_utils import ensure_directory, list_json_files, reset_directory, sanitize_filename
from .utils.logging import truncate_message


@dataclass
class RunSummary:
    """
    Outcome of one pipeline run.

    Attributes:
        processed: Input files attempted.
        rendered:  Names of input files that produced a report.
        skipped:   Names of input files without any QuestionnaireResponse.
        failed:    Names of input files that raised an error.
        outputs:   Paths written by the renderer.
    """
    processed: int = 0
    rendered: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)


class ReportPipeline:
    """
    Definitions -> index -> expansion -> normalization -> rendering.

    Example:
        pipeline = ReportPipeline()
        pipeline.prepare_output()
        summary = pipeline.run(JsonReportWriter())
    """

    def __init__(
        self,
        definitions_dir: Optional[Path] = None,
        input_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        policy: Optional[DuplicateUrlPolicy] = None,
        clean_output: Optional[bool] = None,
    ):
        self.definitions_dir = definitions_dir or base_settings.DEFINITIONS_DIR
        self.input_dir = input_dir or base_settings.INPUT_DIR
        self.output_dir = output_dir or base_settings.OUTPUT_DIR
        self.policy = policy
        self.clean_output = base_settings.CLEAN_OUTPUT if clean_output is None else clean_output
        self.logger = logging.getLogger(__name__)

        self._check_directories()

        self.index: Optional[CanonicalIndex] = None
        self.load_report: Optional[LoadReport] = None
        self.expansion_report: Optional[ExpansionReport] = None
        self._output_ready = False

    def _check_directories(self):
        """The output directory is wiped before a run, it must not hold any corpus."""
        output = self.output_dir.resolve()
        for name, directory in (('definitions', self.definitions_dir), ('input', self.input_dir)):
            if directory.resolve() == output:
                raise ConfigurationError(
                    f"Output directory {self.output_dir} is also the {name} directory"
                )

    # ========================================================================
    # DEFINITIONS
    # ========================================================================

    def prepare_definitions(self) -> CanonicalIndex:
        """
        Load, index, expand and persist the definitional corpus.

        Raises:
            DefinitionsDirectoryError: definitions directory is missing
        """
        corpus = load_definitions(self.definitions_dir, policy=self.policy)
        self.load_report = corpus.report
        self.expansion_report = expand_definition_files(corpus.files, corpus.index)
        self.index = corpus.index
        return self.index

    # ========================================================================
    # OUTPUT
    # ========================================================================

    def prepare_output(self) -> Path:
        """Create the output directory, cleaning old output when configured."""
        if self.clean_output and self.output_dir.exists():
            self.logger.info("Cleaning old output...")
            reset_directory(self.output_dir)
        else:
            ensure_directory(self.output_dir)
        self._output_ready = True
        return self.output_dir

    # ========================================================================
    # BATCH PROCESSING
    # ========================================================================

    def run(self, renderer: BaseReportRenderer) -> RunSummary:
        """
        Render a report for every input file, strictly sequentially.

        Args:
            renderer: Rendering collaborator

        Returns:
            RunSummary
        """
        if self.index is None:
            self.prepare_definitions()
        if not self._output_ready:
            self.prepare_output()
        ensure_directory(self.input_dir)

        normalizer = BundleNormalizer(self.index)
        summary = RunSummary()

        for path in list_json_files(self.input_dir):
            summary.processed += 1
            try:
                self._process_file(path, normalizer, renderer, summary)
            except Exception as e:
                message = truncate_message(str(e), limit_settings.ERROR_MESSAGE_MAX_LENGTH)
                self.logger.error(f"System Error processing {path.name}: {message}")
                summary.failed.append(path.name)

        self.logger.info(
            f"Run complete: {len(summary.rendered)} rendered, "
            f"{len(summary.skipped)} skipped, {len(summary.failed)} failed"
        )
        return summary

    def _process_file(
        self,
        path: Path,
        normalizer: BundleNormalizer,
        renderer: BaseReportRenderer,
        summary: RunSummary,
    ):
        payload = load_resource_file(path)
        self.logger.info(f"Processing: {path.name}")

        unit = normalizer.normalize(payload, path.name)
        if not unit.has_responses:
            self.logger.warning("Skipping: No QuestionnaireResponse found.")
            summary.skipped.append(path.name)
            return

        total = len(unit.sections)
        for position, section in enumerate(unit.sections, start=1):
            self.logger.info(f"  Processing QR {position}/{total}: {section.reference}")

        out_name = sanitize_filename(path.name, limit_settings.MAX_OUTPUT_NAME_LENGTH)
        output_path = self.output_dir / f"{out_name}{renderer.extension}"
        written = renderer.render(build_render_payload(unit), output_path)

        summary.rendered.append(path.name)
        summary.outputs.append(written)
        plural = "s" if total > 1 else ""
        self.logger.info(f"Saved: {written.name} ({total} questionnaire{plural})")
