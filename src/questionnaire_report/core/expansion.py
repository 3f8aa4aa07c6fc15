# ============================================================================
# src/questionnaire_report/core/expansion.py
# ============================================================================
"""
Value-Set Expansion Engine

Inlines answer lists into Questionnaire definitions so forms render
without terminology server access:

    item.answerValueSet = "http://x/ValueSet/yes-no"
        ->  item.answerOption = [{"valueCoding": {...}}, ...]

Answer options are taken from, in order of preference:
1. ValueSet.expansion.contains (pre-computed expansion), used even when empty
2. ValueSet.compose.include rules, each either
   - listing explicit concepts, or
   - naming a CodeSystem that is itself in the index

An unresolvable or empty value set leaves the item untouched. The walk is
idempotent: an expanded item no longer carries answerValueSet.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from ..utils.file_utils import write_json
from ..utils.logging import truncate_message
from ..config import limit_settings
from .canonical_index import CanonicalIndex
from .loader import LoadedFile
from .resources import Resource, ResourceType, resources_of_type, iter_resources, strip_version

logger = logging.getLogger(__name__)

AnswerOption = Dict[str, Dict[str, Any]]


@dataclass
class ExpansionReport:
    """
    Report from expanding a definitional corpus.

    Attributes:
        files_written:           Definition files rewritten on disk.
        questionnaires_expanded: Questionnaires walked.
        items_expanded:          Items whose answerValueSet was inlined.
        unresolved:              Value-set URLs that could not be resolved,
                                 in first-seen order.
        errors:                  Files that could not be written.
    """
    files_written: int = 0
    questionnaires_expanded: int = 0
    items_expanded: int = 0
    unresolved: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def add_unresolved(self, url: str):
        if url not in self.unresolved:
            self.unresolved.append(url)


def _answer_option(system: Optional[str], concept: Dict[str, Any]) -> AnswerOption:
    return {
        "valueCoding": {
            "system": system,
            "code": concept.get("code"),
            "display": concept.get("display"),
        }
    }


def resolve_options(reference_url: str, index: CanonicalIndex) -> Optional[List[AnswerOption]]:
    """
    Resolve a value-set reference to inline answer options.

    Args:
        reference_url: answerValueSet value, ``|version`` is ignored
        index: Canonical index of the definitional corpus

    Returns:
        Options in rule order then concept order (no dedup, no sort), or
        None when the value set is unknown or yields nothing
    """
    value_set = index.get(strip_version(reference_url))
    if value_set is None:
        return None

    options: List[AnswerOption] = []

    contains = (value_set.get("expansion") or {}).get("contains")
    include = (value_set.get("compose") or {}).get("include")

    if contains is not None:
        for entry in contains:
            options.append(_answer_option(entry.get("system"), entry))
    elif include is not None:
        for rule in include:
            system = rule.get("system")
            if rule.get("concept") is not None:
                # Explicit concepts win even when empty, the code system is not consulted
                for concept in rule["concept"]:
                    options.append(_answer_option(system, concept))
            elif system:
                code_system = index.get(system)
                if code_system and code_system.get("concept"):
                    for concept in code_system["concept"]:
                        options.append(_answer_option(system, concept))

    return options or None


def expand_items(
    items: Optional[List[Dict[str, Any]]],
    index: CanonicalIndex,
    report: Optional[ExpansionReport] = None,
) -> Optional[List[Dict[str, Any]]]:
    """
    Expand answerValueSet references in an item tree, in place.

    Args:
        items: Questionnaire.item (or a nested item list)
        index: Canonical index
        report: Optional report collecting counts and unresolved URLs

    Returns:
        The same list, mutated
    """
    if not items:
        return items

    for item in items:
        if item.get("item"):
            expand_items(item["item"], index, report)

        reference = item.get("answerValueSet")
        if not reference:
            continue

        options = resolve_options(reference, index)
        if options is None:
            logger.debug(f"ValueSet not resolved for item {item.get('linkId')}: {reference}")
            if report is not None:
                report.add_unresolved(strip_version(reference))
            continue

        item["answerOption"] = options
        del item["answerValueSet"]
        if report is not None:
            report.items_expanded += 1

    return items


def expand_questionnaire(
    questionnaire: Resource,
    index: CanonicalIndex,
    report: Optional[ExpansionReport] = None,
) -> Resource:
    """Expand a Questionnaire in place and return it."""
    expand_items(questionnaire.get("item"), index, report)
    if report is not None:
        report.questionnaires_expanded += 1
    return questionnaire


def expand_document(
    document: Resource,
    index: CanonicalIndex,
    report: Optional[ExpansionReport] = None,
) -> bool:
    """
    Expand every Questionnaire in a parsed definition file.

    Returns:
        True when the document is a Questionnaire or a Bundle embedding at
        least one, i.e. when the file should be rewritten
    """
    if ResourceType.of(document) is ResourceType.QUESTIONNAIRE:
        expand_questionnaire(document, index, report)
        return True

    if ResourceType.of(document) is ResourceType.BUNDLE:
        questionnaires = resources_of_type(list(iter_resources(document)), ResourceType.QUESTIONNAIRE)
        for questionnaire in questionnaires:
            expand_questionnaire(questionnaire, index, report)
        return bool(questionnaires)

    return False


def expand_definition_files(files: List[LoadedFile], index: CanonicalIndex) -> ExpansionReport:
    """
    Expand and persist a loaded definitional corpus.

    The documents are the same objects the index points into, so the
    index reflects the expanded definitions afterwards. Files without a
    Questionnaire are never rewritten.

    Args:
        files: Loaded definition files
        index: Index built from those files

    Returns:
        ExpansionReport
    """
    report = ExpansionReport()
    logger.info("Expanding Questionnaires (in place)...")

    for loaded in files:
        try:
            if not expand_document(loaded.document, index, report):
                continue
            write_json(loaded.document, loaded.path, indent=2)
        except Exception as e:
            message = truncate_message(str(e), limit_settings.ERROR_MESSAGE_MAX_LENGTH)
            report.errors.append(f"{loaded.path.name}: {message}")
            logger.error(f"Error processing {loaded.path.name}: {message}")
            continue
        report.files_written += 1

    if report.unresolved:
        logger.warning(f"{len(report.unresolved)} ValueSet reference(s) could not be resolved")
    logger.info(f"Done! Updated {report.files_written} definition files")
    return report
