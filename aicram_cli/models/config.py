from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from aicram_cli.exceptions import ConfigError


@dataclass
class AppConfig:
    api_url: str
    token: str

    def __post_init__(self) -> None:
        if not self.api_url:
            raise ConfigError("API URL cannot be empty.")
        if not self.api_url.endswith("/"):
            self.api_url = self.api_url + "/"
        if not self.token:
            raise ConfigError("Token cannot be empty.")


@dataclass(frozen=True)
class AuthContext:
    """Credentials attached to every request made by the API client."""

    token: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        # The backend rejects an empty token; we still send the header.
        return {"token": self.token or ""}
