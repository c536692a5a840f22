"""Drive the assessment wizard from the terminal or from an answers file."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from aicram_cli.exceptions import InputFileError, ValidationError, WizardError
from aicram_cli.wizard import (
    ASSET_CHOICES,
    OTHER,
    THREAT_CHOICES,
    AssessmentWizard,
    Step,
    SubmitFailure,
    SubmitFieldError,
    SubmitOutcome,
    SubmitSuccess,
)


def load_yaml_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise InputFileError(f"Cannot read {path}: {exc.strerror}") from exc
    except yaml.YAMLError as exc:
        raise InputFileError(f"Invalid YAML in {path}.") from exc
    if not isinstance(data, dict):
        raise InputFileError(f"{path} must contain a YAML mapping.")
    return data


def apply_answers(wizard: AssessmentWizard, answers: Dict[str, Any]) -> None:
    """Walk every step with pre-recorded answers, stopping on the summary step."""
    wizard.form.name = str(answers.get("name") or "")
    wizard.form.situation = str(answers.get("situation") or "")
    _advance(wizard)

    if answers.get("organization_id"):
        wizard.select_organization(str(answers["organization_id"]))
    _advance(wizard)

    if answers.get("matrix_id"):
        wizard.select_matrix(str(answers["matrix_id"]))
    _advance(wizard)

    for asset in _as_list(answers.get("asset")):
        _add_answer(wizard.add_asset, asset, ASSET_CHOICES)
    _advance(wizard)

    for threat in _as_list(answers.get("threat")):
        _add_answer(wizard.add_threat, threat, THREAT_CHOICES)
    _advance(wizard)

    wizard.form.constraint = str(answers.get("constraint") or "")
    _advance(wizard)


def submit_answers(wizard: AssessmentWizard) -> SubmitSuccess:
    outcome = wizard.submit()
    if isinstance(outcome, SubmitFieldError):
        raise ValidationError({outcome.field: outcome.message})
    if isinstance(outcome, SubmitFailure):
        raise WizardError(outcome.message)
    return outcome


def run_interactive(wizard: AssessmentWizard) -> Optional[SubmitSuccess]:
    """Prompt through the steps until a result is created or the user gives up."""
    while True:
        step = wizard.step
        print(f"\nStep {int(step)}/{len(Step)}: {step.title}")
        if step == Step.SUMMARY:
            _print_summary(wizard)
            answer = input("Submit assessment? [Yes/Back/Quit] ").strip().lower()
            if answer in ("b", "back"):
                wizard.prev()
                continue
            if answer in ("q", "quit"):
                return None
            if answer not in ("y", "yes"):
                continue
            print("Analyzing...")
            outcome = wizard.submit()
            if isinstance(outcome, SubmitSuccess):
                return outcome
            _print_outcome(outcome)
            continue

        _PROMPTS[step](wizard)
        wizard.next()
        _print_errors(wizard.errors)


def _advance(wizard: AssessmentWizard) -> None:
    current = wizard.step
    if wizard.next() == current:
        raise ValidationError(wizard.errors)


def _add_answer(add: Callable[[str, str], bool], value: Any, choices: List[str]) -> None:
    text = str(value)
    if text in choices:
        add(text, "")
    else:
        add(OTHER, text)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _prompt_situation(wizard: AssessmentWizard) -> None:
    name = input(f"Assessment name [{wizard.form.name or 'auto'}]: ").strip()
    if name:
        wizard.form.name = name
    situation = input("Situation: ").strip()
    if situation:
        wizard.form.situation = situation


def _prompt_organization(wizard: AssessmentWizard) -> None:
    options = [(o.id, f"{o.name} ({o.industry})") for o in wizard.organizations]
    wizard.form.organization_id = _pick("organization", options, wizard.form.organization_id)


def _prompt_matrix(wizard: AssessmentWizard) -> None:
    options = [(m.id, f"{m.name} ({m.type_label})") for m in wizard.matrices]
    wizard.form.matrix_id = _pick("matrix", options, wizard.form.matrix_id)


def _pick(kind: str, options: List[Any], current: str) -> str:
    if not options:
        print(f"No {kind}s found")
        return ""
    for number, (item_id, label) in enumerate(options, start=1):
        marker = "*" if item_id == current else " "
        print(f" {marker}{number}. {label}")
    while True:
        answer = input(f"Select {kind} number (blank to skip, 0 to clear): ").strip()
        if not answer:
            return current
        if answer == "0":
            return ""
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return str(options[int(answer) - 1][0])
        print(f"Please enter a number between 1 and {len(options)}")


def _prompt_assets(wizard: AssessmentWizard) -> None:
    _prompt_items(
        wizard, "asset", ASSET_CHOICES, wizard.form.asset,
        wizard.add_asset, wizard.remove_asset,
    )


def _prompt_threats(wizard: AssessmentWizard) -> None:
    _prompt_items(
        wizard, "threat", THREAT_CHOICES, wizard.form.threat,
        wizard.add_threat, wizard.remove_threat,
    )


def _prompt_items(
    wizard: AssessmentWizard,
    kind: str,
    choices: List[str],
    selected: List[str],
    add: Callable[[str, str], bool],
    remove: Callable[[int], bool],
) -> None:
    for number, choice in enumerate(choices, start=1):
        print(f"  {number}. {choice}")
    while True:
        if selected:
            listed = ", ".join(f"{n}. {item}" for n, item in enumerate(selected, start=1))
            print(f"Selected: {listed}")
        answer = input(
            f"Add {kind} (number or 'other'), 'remove N' to drop one, blank to continue: "
        ).strip()
        if not answer:
            return
        words = answer.split()
        if words[0].lower() == "remove":
            position = words[1] if len(words) == 2 and words[1].isdigit() else "0"
            if not remove(int(position) - 1):
                _print_errors({kind: wizard.errors[kind]})
            continue
        other = ""
        if answer.lower() == OTHER:
            choice = OTHER
            other = input(f"Specify the {kind}: ").strip()
        elif answer.isdigit() and 1 <= int(answer) <= len(choices):
            choice = choices[int(answer) - 1]
        else:
            choice = ""
        if not add(choice, other):
            _print_errors({kind: wizard.errors[kind]})


def _prompt_constraints(wizard: AssessmentWizard) -> None:
    constraint = input("Constraints (optional): ").strip()
    if constraint:
        wizard.form.constraint = constraint


_PROMPTS: Dict[Step, Callable[[AssessmentWizard], None]] = {
    Step.SITUATION: _prompt_situation,
    Step.ORGANIZATION: _prompt_organization,
    Step.MATRIX: _prompt_matrix,
    Step.ASSETS: _prompt_assets,
    Step.THREATS: _prompt_threats,
    Step.CONSTRAINTS: _prompt_constraints,
}


def _print_summary(wizard: AssessmentWizard) -> None:
    form = wizard.form
    organization = wizard.selected_organization()
    matrix = wizard.selected_matrix()
    print(f"  Name:         {form.name or 'Not provided'}")
    print(f"  Situation:    {form.situation}")
    print(f"  Organization: {organization.name if organization else 'None'}")
    print(f"  Matrix:       {matrix.name if matrix else 'None'}")
    print(f"  Assets:       {', '.join(form.asset) or 'None'}")
    print(f"  Threats:      {', '.join(form.threat) or 'None'}")
    print(f"  Constraints:  {form.constraint or 'None'}")


def _print_outcome(outcome: SubmitOutcome) -> None:
    if isinstance(outcome, SubmitFieldError):
        print(f"{outcome.message}. Returning to step {int(outcome.step)}.")
    elif isinstance(outcome, SubmitFailure):
        print(f"Error: {outcome.message}")


def _print_errors(errors: Dict[str, str]) -> None:
    for field, message in errors.items():
        print(f"  ! {field}: {message}")
