from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class BaseFormatter(ABC):
    extension = ""

    @abstractmethod
    def dump(self, data: Any) -> str:
        ...

    def write(self, data: Any, output_path: Path) -> None:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.dump(data))
