from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import yaml

from aicram_cli.formatters.base import BaseFormatter


@dataclass
class MarkdownDocument:
    title: str
    body: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)


class MarkdownFormatter(BaseFormatter):
    extension = ".md"
    _MAX_LINE_LENGTH = 120

    def dump(self, data: Any) -> str:
        if isinstance(data, MarkdownDocument):
            return self.render(data.title, data.body, data.frontmatter)
        return str(data)

    @classmethod
    def render(
        cls,
        title: str,
        body: str,
        frontmatter: Optional[Dict[str, Any]] = None,
    ) -> str:
        parts = []
        if frontmatter:
            fm_text = yaml.safe_dump(
                frontmatter,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            ).rstrip("\n")
            parts.append(f"---\n{fm_text}\n---\n")
        if title:
            parts.append(f"# {title}\n")
        if body:
            parts.append(cls._wrap_body(body.rstrip("\n")) + "\n")
        return "\n".join(parts)

    @staticmethod
    def table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
        lines: List[str] = [
            "| " + " | ".join(headers) + " |",
            "|" + "|".join("---" for _ in headers) + "|",
        ]
        for row in rows:
            cells = [str(cell).replace("|", "\\|").replace("\n", " ") for cell in row]
            lines.append("| " + " | ".join(cells) + " |")
        return "\n".join(lines)

    @classmethod
    def _wrap_body(cls, body: str) -> str:
        wrapped_lines = []
        for line in body.splitlines():
            if cls._should_preserve_line(line):
                wrapped_lines.append(line)
                continue
            wrapped_lines.append(
                textwrap.fill(
                    line,
                    width=cls._MAX_LINE_LENGTH,
                    break_long_words=False,
                    break_on_hyphens=False,
                )
            )
        return "\n".join(wrapped_lines)

    @classmethod
    def _should_preserve_line(cls, line: str) -> bool:
        if len(line) <= cls._MAX_LINE_LENGTH:
            return True
        if line.startswith(("#", "- ", "* ", "> ", "|", "```", "    ", "\t")):
            return True
        return "`" in line or "](" in line or "**" in line
