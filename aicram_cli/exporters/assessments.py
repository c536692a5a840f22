from __future__ import annotations

from dataclasses import asdict
from typing import Any, List, Optional

from aicram_cli.client import ASSESSMENTS
from aicram_cli.exporters.base import BaseExporter
from aicram_cli.formatters.markdown_formatter import MarkdownDocument, MarkdownFormatter
from aicram_cli.lookups import matrix_lookup, username_lookup
from aicram_cli.models.assessments import Assessment
from aicram_cli.models.matrices import RiskMatrix
from aicram_cli.parsing import parse_assessment


class AssessmentsExporter(BaseExporter):
    def export(self) -> None:
        self._ensure_output_dir()
        self._log("Exporting assessments...")

        assessments = [
            parse_assessment(raw) for raw in self.client.iter_items(ASSESSMENTS)
        ]

        owners = username_lookup(self.client)
        owners.resolve(a.user_id for a in assessments)
        matrices = matrix_lookup(self.client)
        matrices.resolve(a.matrix_id for a in assessments)

        rows: List[List[Any]] = []
        for assessment in assessments:
            matrix = matrices.get(assessment.matrix_id)
            owner = owners.get(assessment.user_id)
            stem = f"assessment-{assessment.id}"
            self._write_document(
                stem,
                _build_document(assessment, matrix, owner),
                asdict(assessment),
            )
            rows.append([
                f"[{assessment.name}]({stem}.md)",
                matrix.name if matrix else "",
                owner,
                assessment.created_at,
            ])

        self._write_index(MarkdownDocument(
            title="Assessments",
            body=MarkdownFormatter.table(["Name", "Matrix", "Owner", "Created"], rows),
            frontmatter={"assessment_count": len(assessments)},
        ))
        self._log_done("assessments", len(assessments))


def _build_document(
    assessment: Assessment,
    matrix: Optional[RiskMatrix],
    owner: str,
) -> MarkdownDocument:
    parts: List[str] = ["## Situation", "", assessment.situation, ""]

    for heading, items in (("Assets", assessment.asset), ("Threats", assessment.threat)):
        parts.append(f"## {heading}")
        parts.append("")
        if items:
            parts.extend(f"- {item}" for item in items)
        else:
            parts.append(f"[//]: # (No {heading.lower()} set)")
        parts.append("")

    parts.append("## Constraints")
    parts.append("")
    parts.append(assessment.constraint or "[//]: # (No constraints set)")

    return MarkdownDocument(
        title=assessment.name,
        body="\n".join(parts),
        frontmatter={
            "id": assessment.id,
            "owner": owner,
            "matrix": matrix.name if matrix else "",
            "matrix_type": matrix.type_label if matrix else "",
            "organization_id": assessment.organization_id,
            "created_at": assessment.created_at,
        },
    )
