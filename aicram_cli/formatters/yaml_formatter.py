from __future__ import annotations

from typing import Any

import yaml

from aicram_cli.formatters.base import BaseFormatter


class YamlFormatter(BaseFormatter):
    extension = ".yaml"

    def dump(self, data: Any) -> str:
        return yaml.safe_dump(
            data,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
