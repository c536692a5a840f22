from __future__ import annotations

import json
from typing import Any

from aicram_cli.formatters.base import BaseFormatter


class JsonFormatter(BaseFormatter):
    extension = ".json"

    def dump(self, data: Any) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
