# ============================================================================
# tests/unit/test_assembly.py
# ============================================================================
"""
Tests for render payload assembly and the JSON report writer
"""

import json
import pytest

from questionnaire_report.core.canonical_index import index_resources
from questionnaire_report.core.normalizer import normalize
from questionnaire_report.report import (
    BaseReportRenderer,
    JsonReportWriter,
    build_render_payload,
    format_human_name,
    subject_display,
)
from questionnaire_report.report.assembly import UNKNOWN_SUBJECT


@pytest.fixture
def index(phq_questionnaire):
    return index_resources([phq_questionnaire])


class TestFormatHumanName:

    def test_text_preferred(self):
        assert format_human_name([{"text": "Dr. Jane Doe", "family": "Doe"}]) == "Dr. Jane Doe"

    def test_given_and_family(self):
        assert format_human_name([{"given": ["Jane", "Q"], "family": "Doe"}]) == "Jane Q Doe"

    def test_empty(self):
        assert format_human_name(None) is None
        assert format_human_name([]) is None
        assert format_human_name([{}]) is None


class TestSubjectDisplay:
    """Test the report subject line fallbacks"""

    def test_patient_name(self, index, bundle_of, patient, phq_response):
        unit = normalize(bundle_of(patient, phq_response), index)
        assert subject_display(unit) == "Jane Doe"

    def test_response_display_when_no_patient(self, index, bundle_of, orphan_response):
        unit = normalize(bundle_of(orphan_response), index)
        assert subject_display(unit) == "Subject From Response"

    def test_response_reference(self, index, bundle_of):
        response = {"resourceType": "QuestionnaireResponse", "subject": {"reference": "Patient/p9"}}
        unit = normalize(bundle_of(response), index)
        assert subject_display(unit) == "Patient/p9"

    def test_unnamed_patient_falls_back(self, index, bundle_of, phq_response):
        unit = normalize(bundle_of({"resourceType": "Patient", "id": "anon"}, phq_response), index)
        assert subject_display(unit) == "J. Doe"

    def test_nothing_known(self, index, bundle_of):
        unit = normalize(bundle_of({"resourceType": "QuestionnaireResponse"}), index)
        assert subject_display(unit) == UNKNOWN_SUBJECT


class TestBuildRenderPayload:

    def test_single_response(self, index, bundle_of, patient, phq_response):
        payload = build_render_payload(normalize(bundle_of(patient, phq_response), index))

        assert payload["isMultipleQR"] is False
        assert len(payload["combinedQuestionnaires"]) == 1
        assert payload["combinedQuestionnaires"][0]["title"] == "Patient Health Questionnaire"
        assert payload["subjectDisplay"] == "Jane Doe"

    def test_multiple_responses(self, index, bundle_of, patient, phq_response, orphan_response):
        payload = build_render_payload(normalize(bundle_of(patient, phq_response, orphan_response), index))

        assert payload["isMultipleQR"] is True
        assert [c["title"] for c in payload["combinedQuestionnaires"]] == ["Patient Health Questionnaire", "gad7"]
        assert payload["combinedQuestionnaires"][1]["questionnaire"]["item"] == []

    def test_header_keys_present(self, index, bundle_of, phq_response):
        payload = build_render_payload(normalize(bundle_of(phq_response, bundle_id="b1"), index))

        assert payload["fileName"] == "b1"
        assert payload["patient"] == {"resourceType": "Patient", "name": None}
        assert payload["carePlan"] == {"resourceType": "CarePlan", "category": None}

    def test_serializable(self, index, bundle_of, patient, phq_response, orphan_response):
        payload = build_render_payload(normalize(bundle_of(patient, phq_response, orphan_response), index))
        assert json.loads(json.dumps(payload)) == payload


class TestJsonReportWriter:

    def test_is_a_renderer(self):
        assert isinstance(JsonReportWriter(), BaseReportRenderer)

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            BaseReportRenderer()

    def test_render_writes_payload(self, tmp_path):
        writer = JsonReportWriter()
        target = tmp_path / "out" / f"report{writer.extension}"

        written = writer.render({"fileName": "x", "title": "Übersicht"}, target)
        writer.close()

        assert written == target
        assert json.loads(target.read_text(encoding="utf-8")) == {"fileName": "x", "title": "Übersicht"}
