from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

import requests

from aicram_cli import __version__
from aicram_cli.exceptions import ApiError, AuthenticationError, BackendError
from aicram_cli.models.config import AppConfig, AuthContext
from aicram_cli.models.pagination import Page

MATRICES = "matrices"
ORGANIZATIONS = "organizations"
ASSESSMENTS = "assessments"
RESULTS = "results"
USERS = "users"

# Paginated responses are shaped {"total_count": n, "<key>_items": [...]}.
_ITEMS_KEYS: Dict[str, str] = {
    MATRICES: "matrix_items",
    ORGANIZATIONS: "organization_items",
    ASSESSMENTS: "assessment_items",
    RESULTS: "result_items",
    USERS: "user_items",
}


class AicramClient:
    def __init__(self, config: AppConfig, auth: Optional[AuthContext] = None) -> None:
        self._base_url = config.api_url
        self._auth = auth if auth is not None else AuthContext(config.token)
        self._session = requests.Session()
        self._session.headers.update({
            "User-Agent": f"aicram-cli/{__version__}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

    @property
    def auth(self) -> AuthContext:
        return self._auth

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, json: Optional[Any] = None) -> Any:
        return self._request("POST", path, json=json)

    def put(self, path: str, json: Optional[Any] = None) -> Any:
        return self._request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def list_page(
        self,
        resource: str,
        page: int = 1,
        record_per_page: int = 10,
        params: Optional[Dict[str, Any]] = None,
    ) -> Page:
        query: Dict[str, Any] = {
            "page": page,
            "recordPerPage": record_per_page,
            "startIndex": (page - 1) * record_per_page,
        }
        if params:
            query.update(params)
        data = self.get(resource, params=query)
        if not isinstance(data, dict):
            return Page(total_count=None, items=[])

        raw_items = data.get(_ITEMS_KEYS.get(resource, f"{resource}_items")) or []
        items = [item for item in raw_items if isinstance(item, dict)]
        total = data.get("total_count")
        if not isinstance(total, int) or isinstance(total, bool):
            total = None
        return Page(total_count=total, items=items)

    def iter_items(
        self,
        resource: str,
        record_per_page: int = 100,
        params: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Yield every item; without a total, stop at the first empty or short page."""
        page = 1
        seen = 0
        while True:
            current = self.list_page(resource, page, record_per_page, params=params)
            if not current.items:
                return
            for item in current.items:
                yield item
            seen += len(current.items)
            if current.total_count is None:
                if len(current.items) < record_per_page:
                    return
            elif seen >= current.total_count:
                return
            page += 1

    def get_item(self, resource: str, item_id: str) -> Any:
        return self.get(f"{resource}/{item_id}")

    def create_item(self, resource: str, data: Dict[str, Any]) -> Any:
        return self.post(resource, json=data)

    def update_item(self, resource: str, item_id: str, data: Dict[str, Any]) -> Any:
        return self.put(f"{resource}/{item_id}", json=data)

    def delete_item(self, resource: str, item_id: str) -> Any:
        return self.delete(f"{resource}/{item_id}")

    def remove_item(self, resource: str, item_id: str) -> Any:
        """Soft-delete: the backend marks the record removed instead of dropping it."""
        return self.post(f"{resource}/remove/{item_id}")

    def get_matrix(self, matrix_id: str) -> Any:
        return self.get_item(MATRICES, matrix_id)

    def get_organization(self, organization_id: str) -> Any:
        return self.get_item(ORGANIZATIONS, organization_id)

    def get_assessment(self, assessment_id: str) -> Any:
        return self.get_item(ASSESSMENTS, assessment_id)

    def get_result(self, result_id: str) -> Any:
        return self.get_item(RESULTS, result_id)

    def create_matrix(self, data: Dict[str, Any]) -> Any:
        return self.create_item(MATRICES, data)

    def create_organization(self, data: Dict[str, Any]) -> Any:
        return self.create_item(ORGANIZATIONS, data)

    def create_assessment(self, data: Dict[str, Any]) -> Any:
        return self.create_item(ASSESSMENTS, data)

    def create_result(self, data: Dict[str, Any]) -> Any:
        return self.create_item(RESULTS, data)

    def create_content(self, data: Dict[str, Any]) -> Any:
        return self.post(f"{RESULTS}/contents", json=data)

    def get_username(self, user_id: str) -> Any:
        return self.get(f"{USERS}/username", params={"user_id": user_id})

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        normalized_path = path.lstrip("/")
        url = self._base_url + normalized_path
        try:
            response = self._session.request(
                method, url, headers=self._auth.headers(), **kwargs
            )
        except requests.ConnectionError as exc:
            raise ApiError(
                f"Cannot connect to {self._base_url}. "
                "Check your network connection and API URL."
            ) from exc
        except requests.RequestException as exc:
            raise ApiError(
                f"Cannot connect to {self._base_url}. "
                "Check your network connection and API URL."
            ) from exc

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "Authentication failed. Your token may have expired. "
                "Run aicram-cli --init to set a new token."
            )
        if 400 <= response.status_code < 500:
            code = _error_code(response)
            if code:
                raise BackendError(code, response.status_code)
        if response.status_code == 404:
            raise ApiError(f"Resource not found: {normalized_path}.")
        if response.status_code >= 500:
            raise ApiError(
                f"AI-CRAM server error ({response.status_code}). "
                "Please try again later."
            )

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise ApiError(
                f"AI-CRAM API request failed ({response.status_code}) for {normalized_path}. "
                "Please verify the request and try again."
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                f"Invalid response from AI-CRAM API for {normalized_path}. Expected JSON data."
            ) from exc


def _error_code(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        code = body.get("error")
        if isinstance(code, str) and code:
            return code
    return None
