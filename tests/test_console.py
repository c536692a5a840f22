from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from aicram_cli.console import (
    apply_answers,
    load_yaml_file,
    run_interactive,
    submit_answers,
)
from aicram_cli.exceptions import (
    BackendError,
    InputFileError,
    ValidationError,
    WizardError,
)
from aicram_cli.models.pagination import Page
from aicram_cli.wizard import AssessmentWizard, Step, SubmitSuccess


def _content() -> dict:
    return {"success": 2, "summary": "", "message": "Not enough data", "vulnerability": []}


def _wizard() -> AssessmentWizard:
    client = MagicMock()
    client.list_page.side_effect = [
        Page(1, [{"matrix_id": "m1", "name": "Corporate", "type": 3}]),
        Page(1, [{"organization_id": "o1", "name": "Acme", "industry": "Retail"}]),
    ]
    client.create_assessment.return_value = {"assessment_id": "a1"}
    client.create_content.return_value = _content()
    client.create_result.return_value = {"result_id": "r1"}
    wizard = AssessmentWizard(client)
    wizard.load_choices()
    return wizard


class TestLoadYamlFile:
    def test_reads_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "answers.yaml"
        path.write_text("situation: Office move\nasset:\n  - Servers\n", encoding="utf-8")
        assert load_yaml_file(path) == {"situation": "Office move", "asset": ["Servers"]}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InputFileError, match="Cannot read"):
            load_yaml_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(InputFileError, match="Invalid YAML"):
            load_yaml_file(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(InputFileError, match="must contain a YAML mapping"):
            load_yaml_file(path)


class TestApplyAnswers:
    def test_fills_form_and_reaches_summary(self) -> None:
        wizard = _wizard()
        apply_answers(wizard, {
            "name": "Office move",
            "situation": "Relocating the data center",
            "organization_id": "o1",
            "matrix_id": "m1",
            "asset": ["Servers", "Badge readers"],
            "threat": "Insider Threats",
            "constraint": "Budget",
        })
        assert wizard.step == Step.SUMMARY
        assert wizard.form.organization_id == "o1"
        assert wizard.form.matrix_id == "m1"
        assert wizard.form.asset == ["Servers", "Badge readers"]
        assert wizard.form.threat == ["Insider Threats"]
        assert wizard.form.constraint == "Budget"

    def test_missing_situation_raises(self) -> None:
        wizard = _wizard()
        with pytest.raises(ValidationError, match="Situation is required"):
            apply_answers(wizard, {"name": "x"})

    def test_submit_answers_success(self) -> None:
        wizard = _wizard()
        apply_answers(wizard, {"situation": "s"})
        assert submit_answers(wizard) == SubmitSuccess("a1", "r1")

    def test_submit_answers_field_error(self) -> None:
        wizard = _wizard()
        wizard.client.create_assessment.side_effect = BackendError("organization_error", 400)
        apply_answers(wizard, {"situation": "s", "organization_id": "o1"})
        with pytest.raises(ValidationError, match="organization_id: Organization not found"):
            submit_answers(wizard)

    def test_submit_answers_failure(self) -> None:
        wizard = _wizard()
        wizard.client.create_result.return_value = {}
        apply_answers(wizard, {"situation": "s"})
        with pytest.raises(WizardError, match="result id"):
            submit_answers(wizard)


class TestRunInteractive:
    def test_walkthrough_and_submit(self, capsys: pytest.CaptureFixture[str]) -> None:
        wizard = _wizard()
        answers = [
            "",              # name
            "Payroll move",  # situation
            "1",             # organization
            "1",             # matrix
            "other", "Badge readers", "",  # assets
            "7", "",         # threats
            "",              # constraints
            "yes",
        ]
        with patch("builtins.input", side_effect=answers):
            outcome = run_interactive(wizard)
        assert outcome == SubmitSuccess("a1", "r1")
        assert wizard.form.organization_id == "o1"
        assert wizard.form.asset == ["Badge readers"]
        assert wizard.form.threat == ["DDoS Attacks"]
        out = capsys.readouterr().out
        assert "Step 7/7: Summary" in out
        assert "Analyzing..." in out

    def test_remove_asset_by_position(self, capsys: pytest.CaptureFixture[str]) -> None:
        wizard = _wizard()
        answers = [
            "", "Payroll move", "", "",
            "1", "2", "remove 1", "remove 9", "remove", "",  # assets
            "", "",          # threats, constraints
            "q",
        ]
        with patch("builtins.input", side_effect=answers):
            assert run_interactive(wizard) is None
        assert wizard.form.asset == ["User Credentials"]
        out = capsys.readouterr().out
        assert "Selected: 1. Sensitive Data, 2. User Credentials" in out
        assert out.count("! asset: Please select an asset to remove") == 2

    def test_quit_from_summary(self) -> None:
        wizard = _wizard()
        wizard.form.situation = "s"
        wizard.step = Step.SUMMARY
        with patch("builtins.input", side_effect=["q"]):
            assert run_interactive(wizard) is None
        wizard.client.create_assessment.assert_not_called()

    def test_field_error_returns_to_step(self, capsys: pytest.CaptureFixture[str]) -> None:
        wizard = _wizard()
        wizard.client.create_assessment.side_effect = [
            BackendError("organization_error", 400),
            {"assessment_id": "a2"},
        ]
        wizard.form.situation = "s"
        wizard.step = Step.SUMMARY
        # step 3 matrix prompt (keep), then steps 4-6 blank, then submit again
        answers = ["y", "", "", "", "", "y"]
        with patch("builtins.input", side_effect=answers):
            outcome = run_interactive(wizard)
        assert outcome == SubmitSuccess("a2", "r1")
        assert "Returning to step 3" in capsys.readouterr().out

    def test_empty_situation_reprompts(self) -> None:
        wizard = _wizard()
        wizard.form.situation = ""
        answers = ["", "", "", "Now filled"]
        with patch("builtins.input", side_effect=answers + [""] * 5 + ["q"]):
            assert run_interactive(wizard) is None
        assert wizard.form.situation == "Now filled"
