# ============================================================================
# src/questionnaire_report/report/assembly.py
# ============================================================================
"""
Report Assembly

Builds the single structured payload the rendering collaborator receives
for one input file: the normalized header, every response section, and
the subject line to print when the bundle carried no usable Patient.
"""

from typing import Any, Dict, List, Optional

from ..core.normalizer import NormalizedReportUnit

UNKNOWN_SUBJECT = "Unknown patient"


def format_human_name(names: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    """First HumanName as display text: ``text``, else given + family."""
    if not names:
        return None
    name = names[0]
    if name.get("text"):
        return name["text"]
    parts = list(name.get("given") or [])
    if name.get("family"):
        parts.append(name["family"])
    return " ".join(parts) or None


def subject_display(unit: NormalizedReportUnit) -> str:
    """
    Subject line for the report header.

    A resolved Patient's name wins. Otherwise fall back to what the first
    QuestionnaireResponse says about its subject.
    """
    if unit.patient.resolved:
        name = format_human_name(unit.patient.resource.get("name"))
        if name:
            return name

    response = unit.questionnaire_response or {}
    subject = response.get("subject") or {}
    return subject.get("display") or subject.get("reference") or UNKNOWN_SUBJECT


def build_render_payload(unit: NormalizedReportUnit) -> Dict[str, Any]:
    """
    Render payload for one normalized input file.

    Returns:
        JSON-serializable dict
    """
    payload = unit.to_dict()
    payload["combinedQuestionnaires"] = [section.to_dict() for section in unit.sections]
    payload["isMultipleQR"] = len(unit.sections) > 1
    payload["subjectDisplay"] = subject_display(unit)
    return payload
