from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict

from aicram_cli.models.assessments import AssessmentForm
from aicram_cli.models.matrices import MATRIX_3X3, MATRIX_4X4, MATRIX_5X5, RiskMatrix
from aicram_cli.models.organizations import Organization, OrganizationAsset
from aicram_cli.models.results import RESULT_COMPLETED, RESULT_FAILED
from aicram_cli.payloads import (
    build_assessment_payload,
    build_content_request,
    build_result_payload,
    default_assessment_name,
    matrix_entry,
    organization_entry,
)
from aicram_cli.schemas import ResultContentSchema

_NOW = datetime(2024, 3, 7, 9, 5)


def _matrix(matrix_type: int) -> RiskMatrix:
    values = {}
    for band in range(1, 6):
        values[f"impact_{band}"] = f"I{band}"
        values[f"likelihood_{band}"] = f"L{band}"
    return RiskMatrix(
        id="m1", name="Corporate", status=1, type=matrix_type,
        description="Company matrix", **values,
    )


def _organization() -> Organization:
    return Organization(
        id="o1",
        name="Acme",
        status=1,
        industry="Finance",
        country="Germany",
        employees=120,
        customers=4000,
        revenue=1.5,
        regulation=["GDPR"],
        asset=[OrganizationAsset(name="CRM", value=25000.0, criticality=4)],
        measure="Firewall",
    )


class TestAssessmentPayload:
    def test_default_name_pattern(self) -> None:
        name = default_assessment_name(_NOW)
        assert name == "Assessment - 07/03/24 (09:05)"
        assert re.fullmatch(r"Assessment - \d{2}/\d{2}/\d{2} \(\d{2}:\d{2}\)", name)

    def test_blank_name_gets_default(self) -> None:
        payload = build_assessment_payload(AssessmentForm(name="  ", situation="s"), _NOW)
        assert payload["name"] == "Assessment - 07/03/24 (09:05)"
        assert payload["status"] == 1

    def test_given_name_kept(self) -> None:
        form = AssessmentForm(name="Q1 review", situation="s", asset=["Servers"])
        payload = build_assessment_payload(form, _NOW)
        assert payload["name"] == "Q1 review"
        assert payload["asset"] == ["Servers"]
        assert payload["matrix_id"] == ""


class TestMatrixEntry:
    def test_3x3_uses_middle_bands(self) -> None:
        entry = matrix_entry(_matrix(MATRIX_3X3))
        assert entry["type"] == "3x3"
        for key in ("impact_very_low", "impact_extreme",
                    "likelihood_very_low", "likelihood_extreme"):
            assert key not in entry
        assert entry["impact_low"] == "I2"
        assert entry["likelihood_high"] == "L4"

    def test_4x4_omits_very_low(self) -> None:
        entry = matrix_entry(_matrix(MATRIX_4X4))
        assert "impact_very_low" not in entry
        assert "likelihood_very_low" not in entry
        assert entry["impact_extreme"] == "I5"

    def test_5x5_has_all_bands(self) -> None:
        entry = matrix_entry(_matrix(MATRIX_5X5))
        band_keys = [k for k in entry if k.startswith(("impact_", "likelihood_"))]
        assert len(band_keys) == 10
        assert entry["impact_very_low"] == "I1"
        assert entry["likelihood_extreme"] == "L5"

    def test_unknown_type_uses_3x3_bands(self) -> None:
        entry = matrix_entry(_matrix(99))
        assert entry["type"] == ""
        assert entry["impact_low"] == "I2"
        assert entry["impact_medium"] == "I3"
        assert entry["impact_high"] == "I4"
        assert entry["likelihood_low"] == "L2"
        assert entry["likelihood_high"] == "L4"
        for key in ("impact_very_low", "impact_extreme",
                    "likelihood_very_low", "likelihood_extreme"):
            assert key not in entry


class TestContentRequest:
    def test_without_selections(self) -> None:
        form = AssessmentForm(situation="Remote work rollout", threat=["DDoS Attacks"])
        request = build_content_request(form)
        assert request == {
            "situation": "Remote work rollout",
            "asset": [],
            "threat": ["DDoS Attacks"],
            "constraint": "",
        }

    def test_with_matrix_and_organization(self) -> None:
        form = AssessmentForm(situation="s")
        request = build_content_request(form, _matrix(MATRIX_5X5), _organization())
        assert request["matrix"][0]["name"] == "Corporate"
        assert request["organization"] == [organization_entry(_organization())]
        org = request["organization"][0]
        assert org["asset"] == [{"name": "CRM", "value": 25000.0, "criticality": 4}]
        assert org["regulation"] == ["GDPR"]
        assert "country" not in org

    def test_request_lists_are_copies(self) -> None:
        form = AssessmentForm(situation="s", asset=["Servers"])
        request = build_content_request(form)
        request["asset"].append("APIs")
        assert form.asset == ["Servers"]


def _result_content(**overrides: Any) -> ResultContentSchema:
    data: Dict[str, Any] = {
        "success": 1,
        "summary": "ok",
        "message": "",
        "vulnerability": [{
            "name": "V",
            "description": "D",
            "impact": 3,
            "likelihood": 3,
            "new_impact": 1,
            "new_likelihood": 1,
            "cve": [{"id": "CVE-2024-1", "score": 9.8}, None],
            "mitre": [1003],
            "control": [{"name": "Patch", "description": "Apply updates."}],
        }],
    }
    data.update(overrides)
    return ResultContentSchema.model_validate(data)


class TestResultPayload:
    def test_successful_content_completes(self) -> None:
        payload = build_result_payload("a1", _result_content())
        assert payload["status"] == RESULT_COMPLETED
        assert payload["assessment_id"] == "a1"
        assert payload["content"]["vulnerability"][0]["name"] == "V"

    def test_failed_content_marks_result_failed(self) -> None:
        content = _result_content(success=2, message="no data", vulnerability=[])
        assert build_result_payload("a1", content)["status"] == RESULT_FAILED

    def test_cve_and_mitre_entries_kept_as_received(self) -> None:
        content = build_result_payload("a1", _result_content())["content"]
        vulnerability = content["vulnerability"][0]
        assert vulnerability["cve"] == [{"id": "CVE-2024-1", "score": 9.8}, None]
        assert vulnerability["mitre"] == [1003]

    def test_absent_control_keys_not_added(self) -> None:
        content = build_result_payload("a1", _result_content())["content"]
        assert content["vulnerability"][0]["control"][0] == {
            "name": "Patch",
            "description": "Apply updates.",
        }
