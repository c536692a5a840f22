from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

from aicram_cli.client import AicramClient
from aicram_cli.formatters.json_formatter import JsonFormatter
from aicram_cli.formatters.markdown_formatter import MarkdownDocument, MarkdownFormatter
from aicram_cli.formatters.yaml_formatter import YamlFormatter


class BaseExporter(ABC):
    def __init__(
        self,
        client: AicramClient,
        output_dir: Path,
        *,
        force: bool = False,
        keep_raw_json: bool = False,
    ) -> None:
        self.client = client
        self.output_dir = output_dir
        self.force = force
        self.keep_raw_json = keep_raw_json
        self._overwrite_all = False
        self._md_formatter = MarkdownFormatter()
        self._json_formatter = JsonFormatter()
        self._yaml_formatter = YamlFormatter()

    @abstractmethod
    def export(self) -> None:
        """Fetch records from the API and write them to output_dir."""
        ...

    def _ensure_output_dir(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _log(self, message: str) -> None:
        print(message)

    def _should_write(self, path: Path) -> bool:
        """Check whether *path* should be written, prompting if needed."""
        if not path.exists():
            return True
        if self.force or self._overwrite_all:
            return True
        while True:
            answer = input(
                f"Overwrite existing {path.name}? [Yes/No/All] "
            ).strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            if answer in ("a", "all"):
                self._overwrite_all = True
                return True

    def _write_document(
        self,
        name: str,
        document: MarkdownDocument,
        data: Dict[str, Any],
    ) -> None:
        """Write the Markdown report plus YAML data, and raw JSON when requested."""
        md_path = self.output_dir / (name + self._md_formatter.extension)
        if self._should_write(md_path):
            self._md_formatter.write(document, md_path)

        yaml_path = self.output_dir / (name + self._yaml_formatter.extension)
        if self._should_write(yaml_path):
            self._yaml_formatter.write(data, yaml_path)

        if self.keep_raw_json:
            json_path = self.output_dir / (name + self._json_formatter.extension)
            if self._should_write(json_path):
                self._json_formatter.write(data, json_path)

    def _write_index(self, document: MarkdownDocument) -> None:
        index_path = self.output_dir / "index.md"
        if self._should_write(index_path):
            self._md_formatter.write(document, index_path)

    def _log_done(self, label: str, count: int) -> None:
        noun = "record" if count == 1 else "records"
        self._log(f"Exporting {label}... done ({count} {noun})")
