# ============================================================================
# src/questionnaire_report/core/resources.py
# ============================================================================
"""
FHIR Resource Model

Resources stay plain JSON dicts; this module only classifies them:
- ResourceType: closed set of the types the engine understands,
  everything else is UNKNOWN
- Bundle flattening
- Canonical URL helpers
"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


Resource = Dict[str, Any]


class ResourceType(str, Enum):
    PATIENT = "Patient"
    CARE_PLAN = "CarePlan"
    ENCOUNTER = "Encounter"
    QUESTIONNAIRE = "Questionnaire"
    QUESTIONNAIRE_RESPONSE = "QuestionnaireResponse"
    VALUE_SET = "ValueSet"
    CODE_SYSTEM = "CodeSystem"
    BUNDLE = "Bundle"
    UNKNOWN = "Unknown"  # any other or missing resourceType

    @classmethod
    def of(cls, resource: Any) -> "ResourceType":
        """Classify a parsed JSON value by its resourceType tag."""
        if not isinstance(resource, dict):
            return cls.UNKNOWN
        tag = resource.get("resourceType")
        for member in cls:
            if member is not cls.UNKNOWN and member.value == tag:
                return member
        return cls.UNKNOWN


def iter_resources(payload: Resource) -> Iterator[Resource]:
    """
    Yield the resources carried by a payload.

    A Bundle contributes each entry's resource body, entries without a
    body are dropped. Any other payload contributes itself.
    """
    if ResourceType.of(payload) is not ResourceType.BUNDLE:
        yield payload
        return

    for entry in payload.get("entry") or []:
        if not isinstance(entry, dict):
            continue
        resource = entry.get("resource")
        if isinstance(resource, dict):
            yield resource


def resources_of_type(resources: List[Resource], resource_type: ResourceType) -> List[Resource]:
    return [r for r in resources if ResourceType.of(r) is resource_type]


def first_of_type(resources: List[Resource], resource_type: ResourceType) -> Optional[Resource]:
    for resource in resources:
        if ResourceType.of(resource) is resource_type:
            return resource
    return None


def strip_version(url: str) -> str:
    """'http://x/Questionnaire/phq9|2.0' -> 'http://x/Questionnaire/phq9'"""
    return url.split("|", 1)[0]


def canonical_url(resource: Resource) -> Optional[str]:
    """Return the resource's canonical url, or None when it has none."""
    url = resource.get("url")
    if isinstance(url, str) and url:
        return url
    return None
