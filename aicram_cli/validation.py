from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Union

import pydantic

from aicram_cli.models.matrices import MATRIX_BANDS, BAND_LABELS
from aicram_cli.schemas import ResultContentSchema

_REVENUE_RE = re.compile(r"^(0|0\.\d{1,2}|[1-9]\d*(\.\d{1,2})?)$")
_COUNT_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class ContentValid:
    content: ResultContentSchema

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ContentInvalid:
    path: str
    reason: str

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


ContentCheck = Union[ContentValid, ContentInvalid]


def check_content(content: Any) -> ContentCheck:
    """Structurally check AI-generated result content.

    The first violation found is reported with a dotted path such as
    ``vulnerability[2].control[0].nist``.
    """
    try:
        return ContentValid(ResultContentSchema.model_validate(content))
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        return ContentInvalid(_error_path(first["loc"]), first["msg"])


def validate_content(content: Any) -> bool:
    return check_content(content).ok


def _error_path(loc: Sequence[Union[int, str]]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def validate_matrix(data: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    _check_name(data, errors)

    matrix_type = data.get("type")
    if (
        not isinstance(matrix_type, int)
        or isinstance(matrix_type, bool)
        or matrix_type not in MATRIX_BANDS
    ):
        errors["type"] = "Type must be 3x3, 4x4, or 5x5"
    else:
        for axis in ("impact", "likelihood"):
            for band in MATRIX_BANDS[matrix_type]:
                if not data.get(f"{axis}_{band}"):
                    errors[f"{axis}_{band}"] = (
                        f"{BAND_LABELS[band]} {axis} description is required"
                    )

    if len(str(data.get("description") or "")) > 1000:
        errors["description"] = "Description must not exceed 1,000 characters"
    return errors


def validate_organization(data: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    _check_name(data, errors)

    if not data.get("industry"):
        errors["industry"] = "Industry is required"

    if len(str(data.get("description") or "")) > 1000:
        errors["description"] = "Description must not exceed 1,000 characters"

    country = str(data.get("country") or "")
    if not country:
        errors["country"] = "Country is required"
    elif len(country) > 100:
        errors["country"] = "Country must not exceed 100 characters"

    if not _REVENUE_RE.match(str(data.get("revenue", 0))):
        errors["revenue"] = "Invalid revenue format"
    if not _COUNT_RE.match(str(data.get("employees", 0))):
        errors["employees"] = "Invalid number of employees format"
    if not _COUNT_RE.match(str(data.get("customers", 0))):
        errors["customers"] = "Invalid number of customers format"

    for i, asset in enumerate(data.get("asset") or []):
        if not isinstance(asset, dict) or not asset.get("name"):
            errors[f"asset[{i}].name"] = "Asset name is required"
            continue
        if asset.get("criticality") not in (1, 2, 3, 4, 5):
            errors[f"asset[{i}].criticality"] = "Criticality must be between 1 and 5"
        if not _REVENUE_RE.match(str(asset.get("value", 0))):
            errors[f"asset[{i}].value"] = "Invalid asset value format"
    return errors


def _check_name(data: Mapping[str, Any], errors: Dict[str, str]) -> None:
    name = str(data.get("name") or "")
    if not name:
        errors["name"] = "Name is required"
    elif len(name) < 2 or len(name) > 100:
        errors["name"] = "Name must be 2-100 characters"
