from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from aicram_cli.client import AicramClient
from aicram_cli.exceptions import AicramError
from aicram_cli.models.assessments import Assessment
from aicram_cli.models.matrices import RiskMatrix
from aicram_cli.parsing import parse_assessment, parse_matrix

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_USER = "Unknown User"


class LookupCache(Generic[T]):
    """Resolve foreign keys in batches, one request per unseen id.

    Requests for a batch run concurrently. A key whose request fails is
    cached with the placeholder so the rest of the batch still renders.
    """

    def __init__(
        self,
        fetch: Callable[[str], T],
        placeholder: T,
        *,
        max_workers: int = 8,
    ) -> None:
        self._fetch = fetch
        self._placeholder = placeholder
        self._max_workers = max_workers
        self._values: Dict[str, T] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str) -> T:
        return self._values.get(key, self._placeholder)

    def resolve(self, keys: Iterable[Optional[str]]) -> Dict[str, T]:
        wanted: List[str] = []
        for key in keys:
            if key and key not in self._values and key not in wanted:
                wanted.append(key)

        if wanted:
            workers = min(len(wanted), self._max_workers)
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {executor.submit(self._fetch, key): key for key in wanted}
                for future in as_completed(futures):
                    key = futures[future]
                    try:
                        self._values[key] = future.result()
                    except (AicramError, LookupError, ValueError) as exc:
                        logger.error("Lookup failed for %s: %s", key, exc)
                        self._values[key] = self._placeholder

        return dict(self._values)


def username_lookup(client: AicramClient) -> LookupCache[str]:
    def fetch(user_id: str) -> str:
        data = client.get_username(user_id)
        return str(_require(data, "username"))

    return LookupCache(fetch, UNKNOWN_USER)


def assessment_lookup(client: AicramClient) -> LookupCache[Optional[Assessment]]:
    def fetch(assessment_id: str) -> Optional[Assessment]:
        data = client.get_assessment(assessment_id)
        _require(data, "name")
        return parse_assessment(data)

    return LookupCache(fetch, None)


def matrix_lookup(client: AicramClient) -> LookupCache[Optional[RiskMatrix]]:
    def fetch(matrix_id: str) -> Optional[RiskMatrix]:
        data = client.get_matrix(matrix_id)
        if not isinstance(data, dict):
            raise ValueError("unexpected matrix response")
        return parse_matrix(data)

    return LookupCache(fetch, None)


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict) or data.get(key) is None:
        raise KeyError(key)
    return data[key]
