from __future__ import annotations

import argparse
import getpass
import logging
from pathlib import Path
from typing import List, Optional

from aicram_cli.client import AicramClient
from aicram_cli.config import read_config, write_config
from aicram_cli.console import (
    apply_answers,
    load_yaml_file,
    run_interactive,
    submit_answers,
)
from aicram_cli.exceptions import ConfigError, ValidationError
from aicram_cli.exporters.assessments import AssessmentsExporter
from aicram_cli.exporters.base import BaseExporter
from aicram_cli.exporters.results import ResultsExporter
from aicram_cli.models.config import AppConfig
from aicram_cli.models.matrices import STATUS_ACTIVE
from aicram_cli.risk_matrix import render_matrix_markdown
from aicram_cli.validation import validate_matrix, validate_organization
from aicram_cli.wizard import AssessmentWizard

_SUBDIRS = ("assessments", "results")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aicram-cli",
        description="Command-line client for AI-CRAM cybersecurity risk assessments.",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--init",
        metavar="API_URL",
        help="Initialize configuration with the AI-CRAM API URL.",
    )
    group.add_argument(
        "--assess", nargs="?", const="", metavar="FILE",
        help="Run the assessment wizard, reading answers from a YAML FILE if given.",
    )
    group.add_argument(
        "--create-matrix", metavar="FILE", help="Create a risk matrix from a YAML file.",
    )
    group.add_argument(
        "--create-organization", metavar="FILE",
        help="Create an organization from a YAML file.",
    )
    group.add_argument("--export-all", action="store_true", help="Export all records.")
    group.add_argument("--export-assessments", action="store_true", help="Export assessments.")
    group.add_argument("--export-results", action="store_true", help="Export analysis results.")
    group.add_argument(
        "--risk-matrix", action="store_true", help="Print the 5x5 risk classification matrix.",
    )
    parser.add_argument(
        "--force", action="store_true",
        help="Overwrite existing files without confirmation.",
    )
    parser.add_argument(
        "--keep-raw-json", action="store_true",
        help="Also write raw JSON files alongside Markdown.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _run_init(api_url: str) -> None:
    if not api_url.startswith(("https://", "http://")):
        raise ConfigError("API URL must start with http:// or https://")

    token = getpass.getpass("Enter your API token: ")
    if not token.strip():
        raise ConfigError("Token cannot be empty.")

    config = AppConfig(api_url=api_url, token=token.strip())

    cwd = Path.cwd()
    write_config(cwd, config)

    for subdir in _SUBDIRS:
        (cwd / subdir).mkdir(exist_ok=True)

    print("Configuration saved to .aicram-cli.ini")
    print("Created directories: " + ", ".join(f"{d}/" for d in _SUBDIRS))


def _make_client() -> AicramClient:
    return AicramClient(read_config(Path.cwd()))


def _run_assess(answers_file: str) -> None:
    wizard = AssessmentWizard(_make_client())
    wizard.load_choices()

    if answers_file:
        apply_answers(wizard, load_yaml_file(Path(answers_file)))
        success = submit_answers(wizard)
    else:
        outcome = run_interactive(wizard)
        if outcome is None:
            print("Assessment cancelled.")
            return
        success = outcome

    print(f"Assessment created: {success.assessment_id}")
    print(f"Result created successfully: {success.result_id}")


def _run_create_matrix(path: str) -> None:
    data = load_yaml_file(Path(path))
    data.setdefault("status", STATUS_ACTIVE)
    errors = validate_matrix(data)
    if errors:
        raise ValidationError(errors)
    created = _make_client().create_matrix(data)
    print(f"Matrix created: {_created_id(created, 'matrix_id')}")


def _run_create_organization(path: str) -> None:
    data = load_yaml_file(Path(path))
    data.setdefault("status", STATUS_ACTIVE)
    errors = validate_organization(data)
    if errors:
        raise ValidationError(errors)
    created = _make_client().create_organization(data)
    print(f"Organization created: {_created_id(created, 'organization_id')}")


def _created_id(created: object, key: str) -> str:
    if isinstance(created, dict):
        return str(created.get(key, ""))
    return ""


def _run_export(args: argparse.Namespace) -> None:
    cwd = Path.cwd()
    client = _make_client()

    export_kwargs = {
        "force": args.force,
        "keep_raw_json": args.keep_raw_json,
    }

    exporters: List[BaseExporter] = []
    if args.export_all or args.export_assessments:
        exporters.append(AssessmentsExporter(client, cwd / "assessments", **export_kwargs))
    if args.export_all or args.export_results:
        exporters.append(ResultsExporter(client, cwd / "results", **export_kwargs))

    for exporter in exporters:
        exporter.export()


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.init:
        _run_init(args.init)
    elif args.assess is not None:
        _run_assess(args.assess)
    elif args.create_matrix:
        _run_create_matrix(args.create_matrix)
    elif args.create_organization:
        _run_create_organization(args.create_organization)
    elif args.export_all or args.export_assessments or args.export_results:
        _run_export(args)
    elif args.risk_matrix:
        print(render_matrix_markdown())
    else:
        parser.print_help()
