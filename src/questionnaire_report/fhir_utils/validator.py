# ============================================================================
# src/questionnaire_report/fhir_utils/validator.py
# ============================================================================
"""
FHIR Validator

Structural validation of definitional resources against the
fhir.resources models for the configured FHIR version.

Validation never rejects a resource: findings are returned as messages
and the caller logs them. Questionnaires that fail strict schema checks
are still perfectly renderable in most cases.
"""

from typing import Any, Dict, List, Optional, Type
import importlib
import logging

from pydantic import ValidationError

from ..config.fhir_config import fhir_settings


logger = logging.getLogger(__name__)

# R4 content validates against the R4B models (4.3 is a compatible superset)
_MODEL_PACKAGES = {
    "R4": "fhir.resources.R4B",
    "R4B": "fhir.resources.R4B",
    "R5": "fhir.resources",
}

CHECKED_TYPES = (
    "Patient",
    "CarePlan",
    "Encounter",
    "Questionnaire",
    "QuestionnaireResponse",
    "ValueSet",
    "CodeSystem",
)


class ResourceValidator:
    """
    FHIR resource validator.

    Only the types in CHECKED_TYPES are checked, bundles are validated
    entry by entry by the caller and anything else passes through.
    """

    def __init__(self, fhir_version: Optional[str] = None, max_errors: int = 5):
        """
        Args:
            fhir_version: "R4", "R4B" or "R5" (defaults to configuration)
            max_errors: Maximum findings reported per resource
        """
        self.fhir_version = fhir_version or fhir_settings.FHIR_VERSION
        self.max_errors = max_errors
        self._package = _MODEL_PACKAGES[self.fhir_version]
        self._models: Dict[str, Type[Any]] = {}

    def validate(self, resource: Dict[str, Any]) -> List[str]:
        """
        Validate a resource.

        Args:
            resource: Parsed FHIR resource

        Returns:
            List of problems, empty when valid or not checkable
        """
        resource_type = resource.get("resourceType")
        if resource_type not in CHECKED_TYPES:
            return []

        model = self._model_for(resource_type)
        label = self._label(resource)

        try:
            model.model_validate(resource)
        except ValidationError as e:
            problems = []
            for error in e.errors()[:self.max_errors]:
                location = ".".join(str(part) for part in error.get("loc", ()))
                problems.append(f"{label} invalid at '{location}': {error.get('msg')}")
            return problems
        except ValueError as e:
            return [f"{label} invalid: {e}"]

        return []

    def _model_for(self, resource_type: str) -> Type[Any]:
        """Import the model class, e.g. fhir.resources.R4B.questionnaire.Questionnaire"""
        if resource_type not in self._models:
            module = importlib.import_module(f"{self._package}.{resource_type.lower()}")
            self._models[resource_type] = getattr(module, resource_type)
        return self._models[resource_type]

    @staticmethod
    def _label(resource: Dict[str, Any]) -> str:
        identifier = resource.get("url") or resource.get("id") or "<no id>"
        return f"{resource.get('resourceType')} {identifier}"
