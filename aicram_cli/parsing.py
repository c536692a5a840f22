from __future__ import annotations

from typing import Any, Dict, List, Optional

from aicram_cli.models.assessments import Assessment
from aicram_cli.models.matrices import RiskMatrix
from aicram_cli.models.organizations import Organization, OrganizationAsset
from aicram_cli.models.results import (
    CONTENT_FAILURE,
    Control,
    Result,
    ResultContent,
    Vulnerability,
)


def parse_matrix(raw: Dict[str, Any]) -> RiskMatrix:
    return RiskMatrix(
        id=_as_str(raw.get("matrix_id")),
        name=_as_str(raw.get("name")).strip(),
        status=_as_int(raw.get("status")),
        type=_as_int(raw.get("type")),
        description=_as_str(raw.get("description")),
        impact_1=_as_str(raw.get("impact_1")),
        impact_2=_as_str(raw.get("impact_2")),
        impact_3=_as_str(raw.get("impact_3")),
        impact_4=_as_str(raw.get("impact_4")),
        impact_5=_as_str(raw.get("impact_5")),
        likelihood_1=_as_str(raw.get("likelihood_1")),
        likelihood_2=_as_str(raw.get("likelihood_2")),
        likelihood_3=_as_str(raw.get("likelihood_3")),
        likelihood_4=_as_str(raw.get("likelihood_4")),
        likelihood_5=_as_str(raw.get("likelihood_5")),
    )


def parse_organization(raw: Dict[str, Any]) -> Organization:
    assets: List[OrganizationAsset] = []
    for item in raw.get("asset") or []:
        if isinstance(item, dict):
            assets.append(OrganizationAsset(
                name=_as_str(item.get("name")),
                value=_as_float(item.get("value")),
                criticality=_as_int(item.get("criticality")),
            ))

    return Organization(
        id=_as_str(raw.get("organization_id")),
        name=_as_str(raw.get("name")).strip(),
        status=_as_int(raw.get("status")),
        industry=_as_str(raw.get("industry")),
        country=_as_str(raw.get("country")),
        description=_as_str(raw.get("description")),
        employees=_as_int(raw.get("employees")),
        customers=_as_int(raw.get("customers")),
        revenue=_as_float(raw.get("revenue")),
        regulation=_as_str_list(raw.get("regulation")),
        asset=assets,
        structure=_as_str(raw.get("structure")),
        architecture=_as_str(raw.get("architecture")),
        measure=_as_str(raw.get("measure")),
        constraint=_as_str(raw.get("constraint")),
    )


def parse_assessment(raw: Dict[str, Any]) -> Assessment:
    return Assessment(
        id=_as_str(raw.get("assessment_id")),
        name=_as_str(raw.get("name")).strip(),
        situation=_as_str(raw.get("situation")),
        matrix_id=_as_str(raw.get("matrix_id")),
        organization_id=_as_str(raw.get("organization_id")),
        user_id=_as_str(raw.get("user_id")),
        asset=_as_str_list(raw.get("asset")),
        threat=_as_str_list(raw.get("threat")),
        constraint=_as_str(raw.get("constraint")),
        created_at=_as_str(raw.get("created_at")),
    )


def parse_result(raw: Dict[str, Any]) -> Result:
    return Result(
        id=_as_str(raw.get("result_id")),
        assessment_id=_as_str(raw.get("assessment_id")),
        status=_as_int(raw.get("status")),
        content=parse_content(raw.get("content")),
        user_id=_as_str(raw.get("user_id")),
        created_at=_as_str(raw.get("created_at")),
    )


def parse_content(raw: Any) -> ResultContent:
    """Lenient parse for stored results; use validation.check_content for fresh AI output."""
    if not isinstance(raw, dict):
        return ResultContent(success=CONTENT_FAILURE, summary="", message="")

    vulnerabilities: List[Vulnerability] = []
    for vul in raw.get("vulnerability") or []:
        if not isinstance(vul, dict):
            continue
        controls: List[Control] = []
        for ctrl in vul.get("control") or []:
            if isinstance(ctrl, dict):
                controls.append(Control(
                    name=_as_str(ctrl.get("name")),
                    description=_as_str(ctrl.get("description")),
                    nist=_as_optional_str(ctrl.get("nist")),
                    iso=_as_optional_str(ctrl.get("iso")),
                ))
        vulnerabilities.append(Vulnerability(
            name=_as_str(vul.get("name")),
            description=_as_str(vul.get("description")),
            impact=_as_int(vul.get("impact")),
            likelihood=_as_int(vul.get("likelihood")),
            new_impact=_as_int(vul.get("new_impact")),
            new_likelihood=_as_int(vul.get("new_likelihood")),
            cve=_as_str_list(vul.get("cve")),
            mitre=_as_str_list(vul.get("mitre")),
            control=controls,
        ))

    return ResultContent(
        success=_as_int(raw.get("success")) or CONTENT_FAILURE,
        summary=_as_str(raw.get("summary")),
        message=_as_str(raw.get("message")),
        vulnerability=vulnerabilities,
    )


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _as_float(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]
