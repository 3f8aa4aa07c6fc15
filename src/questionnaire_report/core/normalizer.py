# ============================================================================
# src/questionnaire_report/core/normalizer.py
# ============================================================================
"""
Bundle Normalizer

Turns an arbitrary input payload (a single resource or a Bundle) into a
NormalizedReportUnit: the reconciled header entities plus one section per
QuestionnaireResponse, each bound to its Questionnaire definition.

Fallback rules when data is incomplete:
- no Patient            -> placeholder Patient with name = null
- no CarePlan/Encounter -> placeholder with category/class = null
- unknown Questionnaire -> empty stub Questionnaire, warning logged
- no responses          -> empty list, the caller skips the file

Placeholders are wrapped in an ExtractionSlot with resolved=False so
consumers branch on the slot rather than on a null field.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import logging

from ..config.fhir_config import fhir_settings
from .canonical_index import CanonicalIndex
from .resources import (
    Resource,
    ResourceType,
    canonical_url,
    first_of_type,
    iter_resources,
    resources_of_type,
    strip_version,
)

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "report"

# Sentinel field left null on each placeholder
_PLACEHOLDER_SENTINELS = {
    ResourceType.PATIENT: "name",
    ResourceType.CARE_PLAN: "category",
    ResourceType.ENCOUNTER: "class",
}


@dataclass
class ExtractionSlot:
    """
    Result of extracting one header entity.

    Attributes:
        resource: The extracted resource, or a placeholder
        resolved: False when ``resource`` is a placeholder and report
                  assembly must use its fallback display
    """
    resource: Resource
    resolved: bool

    @property
    def use_fallback(self) -> bool:
        return not self.resolved

    @property
    def resource_type(self) -> str:
        return self.resource["resourceType"]

    @classmethod
    def found(cls, resource: Resource) -> "ExtractionSlot":
        return cls(resource=resource, resolved=True)

    @classmethod
    def placeholder(cls, resource_type: ResourceType) -> "ExtractionSlot":
        return cls(resource=placeholder_resource(resource_type), resolved=False)


@dataclass
class ReportSection:
    """One QuestionnaireResponse paired with its definition."""
    questionnaire_response: Resource
    questionnaire: Resource
    title: str
    definition_resolved: bool
    reference: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionnaireResponse": self.questionnaire_response,
            "questionnaire": self.questionnaire,
            "title": self.title,
        }


@dataclass
class NormalizedReportUnit:
    """
    Reconciled view of one input file, handed to report assembly.

    ``patient`` and ``context`` are always populated (possibly with
    placeholders). ``questionnaire_response`` is the first response, kept
    for consumers that only render a single form.
    """
    file_name: str
    patient: ExtractionSlot
    context: ExtractionSlot
    questionnaire: Optional[Resource]
    questionnaire_response: Optional[Resource]
    questionnaire_responses: List[Resource] = field(default_factory=list)
    sections: List[ReportSection] = field(default_factory=list)

    @property
    def has_responses(self) -> bool:
        return bool(self.questionnaire_responses)

    @property
    def context_key(self) -> str:
        """Payload key for the clinical context: 'carePlan' or 'encounter'"""
        resource_type = self.context.resource_type
        return resource_type[0].lower() + resource_type[1:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileName": self.file_name,
            "patient": self.patient.resource,
            self.context_key: self.context.resource,
            "questionnaire": self.questionnaire,
            "questionnaireResponse": self.questionnaire_response,
            "questionnaireResponses": self.questionnaire_responses,
        }


def placeholder_resource(resource_type: ResourceType) -> Resource:
    """Fresh placeholder for a missing Patient, CarePlan or Encounter."""
    return {"resourceType": resource_type.value, _PLACEHOLDER_SENTINELS[resource_type]: None}


def stub_questionnaire() -> Resource:
    """Empty definition used when a response's Questionnaire cannot be found."""
    return {"resourceType": "Questionnaire", "status": "active", "item": []}


def questionnaire_reference(response: Resource) -> Optional[str]:
    """
    The canonical a response points at.

    R4 uses a canonical string; STU3 used a Reference object.
    """
    reference = response.get("questionnaire")
    if isinstance(reference, dict):
        reference = reference.get("reference")
    if isinstance(reference, str) and reference:
        return reference
    return None


def section_title(questionnaire: Resource, reference: Optional[str], position: int) -> str:
    """
    Title for a response/questionnaire pair.

    Args:
        questionnaire: Resolved or stub definition
        reference: The response's questionnaire reference
        position: 1-based position of the response in the payload
    """
    title = questionnaire.get("title")
    if title:
        return title
    if reference:
        segment = strip_version(reference).split("/")[-1]
        if segment:
            return segment
    return f"Questionnaire {position}"


class BundleNormalizer:
    """
    Normalizes input payloads against a canonical index.

    The index is only read, so one normalizer can process any number of
    files and gives identical results for identical inputs.
    """

    def __init__(
        self,
        index: CanonicalIndex,
        context_types: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            index: Canonical index of the (expanded) definitional corpus
            context_types: Resource types accepted as clinical context,
                the placeholder uses the first (defaults to configuration)
        """
        self.index = index
        self.context_types = [
            ResourceType(t) for t in (context_types or fhir_settings.CLINICAL_CONTEXT_TYPES)
        ]

    def normalize(self, payload: Resource, file_name: Optional[str] = None) -> NormalizedReportUnit:
        """
        Normalize one input payload.

        Args:
            payload: Parsed input file (single resource or Bundle)
            file_name: Source file name, used when the payload has no id

        Returns:
            NormalizedReportUnit
        """
        resources = list(iter_resources(payload))

        patient = first_of_type(resources, ResourceType.PATIENT)
        responses = resources_of_type(resources, ResourceType.QUESTIONNAIRE_RESPONSE)
        embedded = resources_of_type(resources, ResourceType.QUESTIONNAIRE)

        sections = [
            self._bind_section(response, position, embedded)
            for position, response in enumerate(responses, start=1)
        ]

        if sections:
            questionnaire = sections[0].questionnaire
        else:
            questionnaire = embedded[0] if embedded else None

        return NormalizedReportUnit(
            file_name=self._file_name(payload, file_name),
            patient=ExtractionSlot.found(patient) if patient else ExtractionSlot.placeholder(ResourceType.PATIENT),
            context=self._extract_context(resources),
            questionnaire=questionnaire,
            questionnaire_response=responses[0] if responses else None,
            questionnaire_responses=responses,
            sections=sections,
        )

    def resolve_questionnaire(
        self,
        reference: Optional[str],
        embedded: Sequence[Resource] = (),
    ) -> Optional[Resource]:
        """
        Find the definition for a reference: index first, then
        Questionnaires embedded in the same payload. Index hits of any
        other resource type are ignored.
        """
        if not reference:
            return None

        questionnaire = self.index.resolve(reference)
        if ResourceType.of(questionnaire) is ResourceType.QUESTIONNAIRE:
            return questionnaire

        wanted = {reference, strip_version(reference)}
        for candidate in embedded:
            url = canonical_url(candidate)
            if url and (url in wanted or strip_version(url) in wanted):
                return candidate
        return None

    def _bind_section(self, response: Resource, position: int, embedded: Sequence[Resource]) -> ReportSection:
        reference = questionnaire_reference(response)
        questionnaire = self.resolve_questionnaire(reference, embedded)
        resolved = questionnaire is not None

        if not resolved:
            logger.warning(f"Definition not found for {reference}")
            questionnaire = stub_questionnaire()

        return ReportSection(
            questionnaire_response=response,
            questionnaire=questionnaire,
            title=section_title(questionnaire, reference, position),
            definition_resolved=resolved,
            reference=reference,
        )

    def _extract_context(self, resources: List[Resource]) -> ExtractionSlot:
        for resource in resources:
            if ResourceType.of(resource) in self.context_types:
                return ExtractionSlot.found(resource)
        return ExtractionSlot.placeholder(self.context_types[0])

    @staticmethod
    def _file_name(payload: Resource, file_name: Optional[str]) -> str:
        if payload.get("id"):
            return str(payload["id"])
        if file_name:
            return Path(file_name).stem
        return DEFAULT_FILE_NAME


def normalize(
    payload: Resource,
    index: CanonicalIndex,
    file_name: Optional[str] = None,
) -> NormalizedReportUnit:
    """Normalize one payload against an index."""
    return BundleNormalizer(index).normalize(payload, file_name)
