from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Optional

from aicram_cli.models.assessments import AssessmentForm
from aicram_cli.models.matrices import BAND_NAMES, RiskMatrix
from aicram_cli.models.organizations import Organization
from aicram_cli.models.results import (
    CONTENT_SUCCESS,
    RESULT_COMPLETED,
    RESULT_FAILED,
)
from aicram_cli.schemas import ResultContentSchema

ASSESSMENT_ACTIVE = 1


def default_assessment_name(now: datetime) -> str:
    return now.strftime("Assessment - %d/%m/%y (%H:%M)")


def build_assessment_payload(form: AssessmentForm, now: datetime) -> Dict[str, Any]:
    payload = asdict(form)
    payload["status"] = ASSESSMENT_ACTIVE
    if not form.name.strip():
        payload["name"] = default_assessment_name(now)
    return payload


def build_content_request(
    form: AssessmentForm,
    matrix: Optional[RiskMatrix] = None,
    organization: Optional[Organization] = None,
) -> Dict[str, Any]:
    """Denormalize the wizard selections into the content-generation request."""
    payload: Dict[str, Any] = {
        "situation": form.situation,
        "asset": list(form.asset),
        "threat": list(form.threat),
        "constraint": form.constraint,
    }
    if matrix is not None:
        payload["matrix"] = [matrix_entry(matrix)]
    if organization is not None:
        payload["organization"] = [organization_entry(organization)]
    return payload


def matrix_entry(matrix: RiskMatrix) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "name": matrix.name,
        "description": matrix.description,
        "type": matrix.type_label,
    }
    # 3x3 uses bands 2-4, 4x4 bands 2-5, 5x5 all five.
    for band in matrix.bands:
        entry[f"impact_{BAND_NAMES[band]}"] = matrix.impact(band)
    for band in matrix.bands:
        entry[f"likelihood_{BAND_NAMES[band]}"] = matrix.likelihood(band)
    return entry


def organization_entry(organization: Organization) -> Dict[str, Any]:
    return {
        "name": organization.name,
        "description": organization.description,
        "industry": organization.industry,
        "employees": organization.employees,
        "customers": organization.customers,
        "revenue": organization.revenue,
        "regulation": list(organization.regulation),
        "asset": [
            {"name": a.name, "value": a.value, "criticality": a.criticality}
            for a in organization.asset
        ],
        "structure": organization.structure,
        "architecture": organization.architecture,
        "measure": organization.measure,
        "constraint": organization.constraint,
    }


def build_result_payload(assessment_id: str, content: ResultContentSchema) -> Dict[str, Any]:
    status = RESULT_COMPLETED if content.success == CONTENT_SUCCESS else RESULT_FAILED
    return {
        "status": status,
        "assessment_id": assessment_id,
        "content": content.to_payload(),
    }
