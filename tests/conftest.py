# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import json
import pytest
from pathlib import Path


def write_resource(path: Path, resource) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(resource, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def yes_no_value_set():
    """ValueSet with a pre-computed expansion"""
    return {
        "resourceType": "ValueSet",
        "url": "http://example.org/ValueSet/yes-no|1.0",
        "status": "active",
        "expansion": {
            "contains": [
                {"system": "http://example.org/CodeSystem/yn", "code": "Y", "display": "Yes"},
                {"system": "http://example.org/CodeSystem/yn", "code": "N", "display": "No"},
            ]
        },
    }


@pytest.fixture
def frequency_code_system():
    return {
        "resourceType": "CodeSystem",
        "url": "http://example.org/CodeSystem/frequency",
        "status": "active",
        "content": "complete",
        "concept": [
            {"code": "never", "display": "Never"},
            {"code": "often", "display": "Often"},
        ],
    }


@pytest.fixture
def frequency_value_set():
    """ValueSet composed from one explicit rule and one code-system rule"""
    return {
        "resourceType": "ValueSet",
        "url": "http://example.org/ValueSet/frequency",
        "status": "active",
        "compose": {
            "include": [
                {
                    "system": "http://example.org/CodeSystem/extra",
                    "concept": [{"code": "na", "display": "Not asked"}],
                },
                {"system": "http://example.org/CodeSystem/frequency"},
            ]
        },
    }


@pytest.fixture
def phq_questionnaire():
    """Questionnaire with a nested group and two value-set bound items"""
    return {
        "resourceType": "Questionnaire",
        "url": "http://example.org/Questionnaire/phq|2.0",
        "title": "Patient Health Questionnaire",
        "status": "active",
        "item": [
            {
                "linkId": "1",
                "type": "choice",
                "text": "Feeling down?",
                "answerValueSet": "http://example.org/ValueSet/yes-no|1.0",
            },
            {
                "linkId": "2",
                "type": "group",
                "item": [
                    {
                        "linkId": "2.1",
                        "type": "choice",
                        "answerValueSet": "http://example.org/ValueSet/frequency",
                    },
                    {
                        "linkId": "2.2",
                        "type": "choice",
                        "answerValueSet": "http://example.org/ValueSet/missing",
                    },
                ],
            },
        ],
    }


@pytest.fixture
def patient():
    return {
        "resourceType": "Patient",
        "id": "pat-1",
        "name": [{"given": ["Jane"], "family": "Doe"}],
    }


@pytest.fixture
def phq_response():
    return {
        "resourceType": "QuestionnaireResponse",
        "id": "qr-1",
        "status": "completed",
        "questionnaire": "http://example.org/Questionnaire/phq|2.0",
        "subject": {"reference": "Patient/pat-1", "display": "J. Doe"},
        "item": [{"linkId": "1", "answer": [{"valueCoding": {"code": "Y"}}]}],
    }


@pytest.fixture
def orphan_response():
    """Response whose questionnaire is not in any corpus"""
    return {
        "resourceType": "QuestionnaireResponse",
        "id": "qr-2",
        "status": "completed",
        "questionnaire": "http://example.org/Questionnaire/gad7|3",
        "subject": {"display": "Subject From Response"},
    }


def make_bundle(*resources, bundle_id=None):
    bundle = {
        "resourceType": "Bundle",
        "type": "collection",
        "entry": [{"resource": r} for r in resources],
    }
    if bundle_id:
        bundle["id"] = bundle_id
    return bundle


@pytest.fixture
def definitions_dir(tmp_path, yes_no_value_set, frequency_value_set, frequency_code_system, phq_questionnaire):
    """Definitional corpus on disk: one bare questionnaire, one terminology bundle"""
    directory = tmp_path / "questionnaires"
    write_resource(directory / "phq.json", phq_questionnaire)
    write_resource(
        directory / "terminology.json",
        make_bundle(yes_no_value_set, frequency_value_set, frequency_code_system),
    )
    return directory


@pytest.fixture
def input_dir(tmp_path, patient, phq_response, orphan_response):
    directory = tmp_path / "input"
    write_resource(directory / "Jane Doe.json", make_bundle(patient, phq_response, orphan_response, bundle_id="bundle-jane"))
    write_resource(directory / "no-answers.json", make_bundle(patient))
    return directory


@pytest.fixture
def bundle_of():
    """Factory fixture: bundle_of(*resources, bundle_id=None)"""
    return make_bundle


@pytest.fixture
def write_json_file():
    """Factory fixture: write_json_file(path, resource)"""
    return write_resource
