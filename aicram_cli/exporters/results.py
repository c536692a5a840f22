from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from aicram_cli.client import RESULTS
from aicram_cli.exporters.base import BaseExporter
from aicram_cli.formatters.markdown_formatter import MarkdownDocument, MarkdownFormatter
from aicram_cli.lookups import assessment_lookup, matrix_lookup
from aicram_cli.models.assessments import Assessment
from aicram_cli.models.matrices import RiskMatrix
from aicram_cli.models.results import CONTENT_SUCCESS, Control, Result, Vulnerability
from aicram_cli.parsing import parse_result
from aicram_cli.risk_matrix import rating_label, risk_rating


class ResultsExporter(BaseExporter):
    def export(self) -> None:
        self._ensure_output_dir()
        self._log("Exporting results...")

        results = [parse_result(raw) for raw in self.client.iter_items(RESULTS)]

        assessments = assessment_lookup(self.client)
        assessments.resolve(r.assessment_id for r in results)
        matrices = matrix_lookup(self.client)
        matrices.resolve(
            a.matrix_id for a in (assessments.get(r.assessment_id) for r in results) if a
        )

        rows: List[List[Any]] = []
        for result in results:
            assessment = assessments.get(result.assessment_id)
            matrix = matrices.get(assessment.matrix_id) if assessment else None
            stem = _file_stem(result)
            self._write_document(
                stem,
                _build_report(result, assessment, matrix),
                asdict(result),
            )
            rows.append([
                f"[{result.id}]({stem}.md)",
                assessment.name if assessment else "",
                result.status_label,
                len(result.content.vulnerability),
                result.created_at,
            ])

        self._write_index(MarkdownDocument(
            title="Results",
            body=MarkdownFormatter.table(
                ["Result", "Assessment", "Status", "Vulnerabilities", "Created"], rows,
            ),
            frontmatter={"result_count": len(results)},
        ))
        self._log_done("results", len(results))


def _file_stem(result: Result) -> str:
    return f"result-{result.id}"


def _build_report(
    result: Result,
    assessment: Optional[Assessment],
    matrix: Optional[RiskMatrix],
) -> MarkdownDocument:
    content = result.content
    matrix_type = matrix.type if matrix else None

    frontmatter: Dict[str, Any] = {
        "id": result.id,
        "assessment_id": result.assessment_id,
        "assessment": assessment.name if assessment else "",
        "matrix": matrix.name if matrix else "",
        "status": result.status_label,
        "success": content.success == CONTENT_SUCCESS,
        "created_at": result.created_at,
        "vulnerability_count": len(content.vulnerability),
    }

    parts: List[str] = []
    parts.append("## Summary")
    parts.append("")
    parts.append(content.summary or "[//]: # (No summary)")
    parts.append("")
    if content.message:
        parts.append(f"> {content.message}")
        parts.append("")

    if content.vulnerability:
        parts.append("## Risk Overview")
        parts.append("")
        parts.append(_risk_table(content.vulnerability, matrix_type))
        parts.append("")

    for index, vul in enumerate(content.vulnerability, start=1):
        parts.extend(_vulnerability_section(index, vul))

    title = assessment.name if assessment and assessment.name else f"Result {result.id}"
    return MarkdownDocument(title=title, body="\n".join(parts), frontmatter=frontmatter)


def _risk_table(vulnerabilities: List[Vulnerability], matrix_type: Optional[int]) -> str:
    rows = []
    for vul in vulnerabilities:
        before = risk_rating(matrix_type, vul.impact, vul.likelihood)
        after = risk_rating(matrix_type, vul.new_impact, vul.new_likelihood)
        rows.append([
            vul.name,
            vul.impact,
            vul.likelihood,
            rating_label(before),
            vul.new_impact,
            vul.new_likelihood,
            rating_label(after),
        ])
    return MarkdownFormatter.table(
        ["Vulnerability", "Impact", "Likelihood", "Risk",
         "Residual Impact", "Residual Likelihood", "Residual Risk"],
        rows,
    )


def _vulnerability_section(index: int, vul: Vulnerability) -> List[str]:
    parts = [f"## {index}. {vul.name}", "", vul.description, ""]
    if vul.cve:
        parts.append(f"- **CVE:** {', '.join(vul.cve)}")
    if vul.mitre:
        parts.append(f"- **MITRE ATT&CK:** {', '.join(vul.mitre)}")
    if vul.cve or vul.mitre:
        parts.append("")

    parts.append("### Controls")
    parts.append("")
    if vul.control:
        parts.extend(_control_line(ctrl) for ctrl in vul.control)
    else:
        parts.append("[//]: # (No controls recommended)")
    parts.append("")
    return parts


def _control_line(ctrl: Control) -> str:
    refs = []
    if ctrl.nist:
        refs.append(f"NIST: {ctrl.nist}")
    if ctrl.iso:
        refs.append(f"ISO: {ctrl.iso}")
    suffix = f" ({', '.join(refs)})" if refs else ""
    return f"- **{ctrl.name}**{suffix}: {ctrl.description}"
