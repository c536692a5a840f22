"""Seven-step assessment wizard.

The wizard collects an :class:`AssessmentForm` one step at a time and, on
submit, chains three dependent backend calls: create the assessment,
generate the AI content, and store the result. Each submit returns one of
:class:`SubmitSuccess`, :class:`SubmitFieldError` or :class:`SubmitFailure`.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Union

from aicram_cli.client import MATRICES, ORGANIZATIONS, AicramClient
from aicram_cli.exceptions import (
    AicramError,
    BackendError,
    WizardBusyError,
    WizardError,
)
from aicram_cli.models.assessments import AssessmentForm
from aicram_cli.models.matrices import RiskMatrix
from aicram_cli.models.organizations import Organization
from aicram_cli.parsing import parse_matrix, parse_organization
from aicram_cli.payloads import (
    build_assessment_payload,
    build_content_request,
    build_result_payload,
)
from aicram_cli.validation import ContentInvalid, check_content

logger = logging.getLogger(__name__)

ASSET_CHOICES = [
    "Sensitive Data",
    "User Credentials",
    "Encryption Keys",
    "Servers",
    "Network Infrastructure",
    "Endpoints",
    "Cloud Resources",
    "Databases",
    "Web Applications",
    "APIs",
    "IoT Devices",
    "Software Source Code",
    "Backup Systems",
]

THREAT_CHOICES = [
    "Data Breaches",
    "Unauthorized Access",
    "Credential Management",
    "Social Engineering",
    "Malware Attacks",
    "Insider Threats",
    "DDoS Attacks",
    "Third-Party Risks",
    "Unpatched Software",
    "Misconfigured Security Settings",
    "Compliance and Regulatory Violations",
    "Lack of Incident Response Plans",
    "Zero-Day Vulnerabilities",
]

OTHER = "other"
CHOICES_PAGE_SIZE = 100
GENERIC_FAILURE = "Failed to create assessment"


class Step(IntEnum):
    SITUATION = 1
    ORGANIZATION = 2
    MATRIX = 3
    ASSETS = 4
    THREATS = 5
    CONSTRAINTS = 6
    SUMMARY = 7

    @property
    def title(self) -> str:
        return self.name.capitalize()


class Phase(Enum):
    INTERACTIVE = "interactive"
    ANALYZING = "analyzing"
    ERROR = "error"


@dataclass(frozen=True)
class SubmitSuccess:
    assessment_id: str
    result_id: str


@dataclass(frozen=True)
class SubmitFieldError:
    step: Step
    field: str
    message: str


@dataclass(frozen=True)
class SubmitFailure:
    message: str


SubmitOutcome = Union[SubmitSuccess, SubmitFieldError, SubmitFailure]

# Backend field errors and the step the user is sent back to.
_FIELD_ERROR_STEPS: Dict[str, Step] = {
    "matrix_error": Step.ORGANIZATION,
    "organization_error": Step.MATRIX,
}


class AssessmentWizard:
    def __init__(
        self,
        client: AicramClient,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.client = client
        self.form = AssessmentForm()
        self.step = Step.SITUATION
        self.phase = Phase.INTERACTIVE
        self.errors: Dict[str, str] = {}
        self.error: Optional[str] = None
        self.matrices: List[RiskMatrix] = []
        self.organizations: List[Organization] = []
        self._clock = clock
        self._submit_lock = threading.Lock()

    # -- choices --------------------------------------------------------

    def load_choices(self) -> None:
        """Fetch selectable matrices and organizations; failures leave a list empty."""
        self.matrices = [
            parse_matrix(raw) for raw in self._first_page(MATRICES)
        ]
        self.organizations = [
            parse_organization(raw) for raw in self._first_page(ORGANIZATIONS)
        ]

    def _first_page(self, resource: str) -> List[Dict]:
        try:
            return self.client.list_page(resource, 1, CHOICES_PAGE_SIZE).items
        except AicramError as exc:
            logger.warning("Could not load %s: %s", resource, exc)
            return []

    def selected_matrix(self) -> Optional[RiskMatrix]:
        return _find(self.matrices, self.form.matrix_id)

    def selected_organization(self) -> Optional[Organization]:
        return _find(self.organizations, self.form.organization_id)

    def select_matrix(self, matrix_id: str) -> None:
        self.form.matrix_id = "" if self.form.matrix_id == matrix_id else matrix_id

    def select_organization(self, organization_id: str) -> None:
        if self.form.organization_id == organization_id:
            self.form.organization_id = ""
        else:
            self.form.organization_id = organization_id

    # -- assets and threats ---------------------------------------------

    def add_asset(self, choice: str, other: str = "") -> bool:
        return self._add_item("asset", self.form.asset, choice, other)

    def remove_asset(self, index: int) -> bool:
        return self._remove_item("asset", self.form.asset, index)

    def add_threat(self, choice: str, other: str = "") -> bool:
        return self._add_item("threat", self.form.threat, choice, other)

    def remove_threat(self, index: int) -> bool:
        return self._remove_item("threat", self.form.threat, index)

    def _add_item(self, kind: str, items: List[str], choice: str, other: str) -> bool:
        if choice == OTHER and not other:
            self.errors[kind] = f"Please specify the {kind}"
            return False
        value = other if choice == OTHER else choice
        if not value:
            self.errors[kind] = f"Please select {_article(kind)} {kind}"
            return False
        if value in items:
            self.errors[kind] = f"This {kind} is already added"
            return False
        items.append(value)
        self.errors.pop(kind, None)
        return True

    def _remove_item(self, kind: str, items: List[str], index: int) -> bool:
        if not 0 <= index < len(items):
            self.errors[kind] = f"Please select {_article(kind)} {kind} to remove"
            return False
        del items[index]
        self.errors.pop(kind, None)
        return True

    # -- navigation -----------------------------------------------------

    def step_status(self, step: Step) -> str:
        if step == self.step:
            return "current"
        if step < self.step:
            return "completed"
        return "upcoming"

    def validate_step(self) -> bool:
        errors: Dict[str, str] = {}
        if self.step == Step.SITUATION and not self.form.situation:
            errors["situation"] = "Situation is required"
        self.errors = errors
        return not errors

    def validate_form(self) -> bool:
        errors: Dict[str, str] = {}
        if not self.form.situation:
            errors["situation"] = "Situation is required"
        self.errors = errors
        return not errors

    def next(self) -> Step:
        self._leave_error_phase()
        if self.validate_step():
            self.step = Step(min(self.step + 1, Step.SUMMARY))
        return self.step

    def prev(self) -> Step:
        self._leave_error_phase()
        self.step = Step(max(self.step - 1, Step.SITUATION))
        return self.step

    def _leave_error_phase(self) -> None:
        if self.phase is Phase.ERROR:
            self.phase = Phase.INTERACTIVE

    # -- submission -----------------------------------------------------

    @property
    def analyzing(self) -> bool:
        return self.phase is Phase.ANALYZING

    def submit(self) -> SubmitOutcome:
        if self.step != Step.SUMMARY:
            raise WizardError("The assessment can only be submitted from the summary step.")
        if not self._submit_lock.acquire(blocking=False):
            raise WizardBusyError("An analysis is already in progress.")
        try:
            return self._submit()
        finally:
            self._submit_lock.release()

    def _submit(self) -> SubmitOutcome:
        self.error = None
        if not self.validate_form():
            self.step = Step.SITUATION
            return SubmitFieldError(Step.SITUATION, "situation", self.errors["situation"])

        payload = build_assessment_payload(self.form, self._clock())
        try:
            created = self.client.create_assessment(payload)
        except BackendError as exc:
            target = _FIELD_ERROR_STEPS.get(exc.code)
            if target is not None and exc.field:
                return self._field_error(target, exc.field, str(exc))
            return self._fail(exc)
        except AicramError as exc:
            return self._fail(exc)

        assessment_id = str(created.get("assessment_id") or "") if isinstance(created, dict) else ""
        if not assessment_id:
            return self._fail(WizardError("The backend did not return an assessment id."))
        logger.info("Created assessment %s", assessment_id)

        self.phase = Phase.ANALYZING
        try:
            result_id = self._analyze(assessment_id)
        except AicramError as exc:
            return self._fail(exc)

        self.phase = Phase.INTERACTIVE
        return SubmitSuccess(assessment_id=assessment_id, result_id=result_id)

    def _analyze(self, assessment_id: str) -> str:
        request = build_content_request(
            self.form, self.selected_matrix(), self.selected_organization()
        )
        logger.debug("Content request: %s", request)
        raw_content = self.client.create_content(request)

        check = check_content(raw_content)
        if isinstance(check, ContentInvalid):
            logger.error("Invalid result content at %s", check)
            raise WizardError(f"Invalid result content ({check}).")

        created = self.client.create_result(build_result_payload(assessment_id, check.content))
        result_id = created.get("result_id") if isinstance(created, dict) else None
        if not result_id:
            raise WizardError("The backend did not return a result id.")
        return str(result_id)

    def _field_error(self, step: Step, field: str, message: str) -> SubmitFieldError:
        self.errors[field] = message
        self.step = step
        self.phase = Phase.ERROR
        return SubmitFieldError(step, field, message)

    def _fail(self, exc: Exception) -> SubmitFailure:
        logger.error("Assessment submission failed: %s", exc)
        self.error = str(exc) or GENERIC_FAILURE
        self.phase = Phase.INTERACTIVE
        return SubmitFailure(self.error)


def _find(items: List[Any], item_id: str) -> Any:
    if not item_id:
        return None
    for item in items:
        if item.id == item_id:
            return item
    return None


def _article(kind: str) -> str:
    return "an" if kind[0] in "aeiou" else "a"
