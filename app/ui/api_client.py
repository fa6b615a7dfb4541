"""
HTTP client used by the Streamlit pages.

Every call returns an ApiResult instead of raising, so pages branch on
``result.ok`` and show ``result.error`` in a notification.
"""
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15
GENERIC_ERROR = "Something went wrong. Please try again."


def get_api_base_url() -> str:
    """
    Normalize API base URL from environment variable.

    - Empty env var -> http://localhost:8000 (local dev)
    - Full URL (http:// or https://) -> use as-is
    - Bare hostname -> prepend https://
    """
    raw = os.getenv("API_BASE_URL", "").strip().rstrip("/")
    if not raw:
        return "http://localhost:8000"
    if raw.startswith("http://") or raw.startswith("https://"):
        return raw
    return f"https://{raw}"


@dataclass
class ApiResult:
    """Outcome of one API call."""
    ok: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def unauthorized(self) -> bool:
        return self.status_code == 401


def error_detail(response: requests.Response) -> str:
    """Backend error text, falling back to a generic message."""
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, list):
        # Pydantic validation errors
        messages = [item.get("msg", "") for item in detail if isinstance(item, dict)]
        detail = "; ".join(m for m in messages if m)
    if not detail:
        if response.status_code >= 500:
            return "Server error. Please try again later."
        return GENERIC_ERROR
    return str(detail)


class ApiClient:
    """Thin wrapper over the /api/v1 endpoints."""

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, timeout: int = DEFAULT_TIMEOUT):
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.token = token
        self.timeout = timeout

    def headers(self) -> Dict[str, str]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, raw: bool = False, **kwargs) -> ApiResult:
        url = f"{self.base_url}/api/v1{path}"
        try:
            response = requests.request(method, url, headers=self.headers(), timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            return ApiResult(ok=False, error=f"Could not reach the server: {e}")

        if response.status_code >= 400:
            detail = error_detail(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {detail}")
            return ApiResult(ok=False, error=detail, status_code=response.status_code)

        if raw:
            data = response.content
        elif response.status_code == 204 or not response.content:
            data = None
        else:
            data = response.json()
        return ApiResult(ok=True, data=data, status_code=response.status_code)

    # Auth

    def register(self, name: str, email: str, password: str, password_confirm: str) -> ApiResult:
        return self._request("POST", "/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            "password_confirm": password_confirm,
        })

    def login(self, email: str, password: str) -> ApiResult:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def logout(self) -> ApiResult:
        return self._request("POST", "/auth/logout")

    def me(self) -> ApiResult:
        return self._request("GET", "/auth/me")

    def request_password_reset(self, email: str) -> ApiResult:
        return self._request("POST", "/auth/password-reset/request", json={"email": email})

    def confirm_password_reset(self, token: str, password: str, password_confirm: str) -> ApiResult:
        return self._request("POST", "/auth/password-reset/confirm", json={
            "token": token,
            "password": password,
            "password_confirm": password_confirm,
        })

    # Analyses

    def list_records(self, resource: str) -> ApiResult:
        return self._request("GET", f"/{resource}/")

    def get_record(self, resource: str, record_id: int) -> ApiResult:
        return self._request("GET", f"/{resource}/{record_id}")

    def create_record(self, resource: str, payload: Dict[str, Any]) -> ApiResult:
        return self._request("POST", f"/{resource}/", json=payload)

    def update_record(self, resource: str, record_id: int, payload: Dict[str, Any]) -> ApiResult:
        return self._request("PUT", f"/{resource}/{record_id}", json=payload)

    def delete_record(self, resource: str, record_id: int) -> ApiResult:
        return self._request("DELETE", f"/{resource}/{record_id}")

    def preview_risk(self, severity: int, likelihood: int) -> ApiResult:
        return self._request("POST", "/hiradc/preview", json={"severity": severity, "likelihood": likelihood})

    def generate_insight(self, payload: Dict[str, Any]) -> ApiResult:
        return self._request("POST", "/hiradc/insight", json=payload)

    def preview_event_tree(self, barriers: List[Dict[str, Any]]) -> ApiResult:
        return self._request("POST", "/eta/preview", json={"barriers": barriers})

    def preview_metrics(self, payload: Dict[str, Any]) -> ApiResult:
        return self._request("POST", "/calculator/preview", json=payload)

    # Reports and dashboard

    def dashboard(self) -> ApiResult:
        return self._request("GET", "/dashboard/")

    def list_reports(self, report_type: Optional[str] = None, search: Optional[str] = None, page: int = 1) -> ApiResult:
        params = {"page": page}
        if report_type:
            params["type"] = report_type
        if search:
            params["search"] = search
        return self._request("GET", "/reports/", params=params)

    def delete_report(self, report_type: str, record_id: int) -> ApiResult:
        return self._request("DELETE", f"/reports/{report_type}/{record_id}")

    def report_pdf(self, report_type: str, record_id: int) -> ApiResult:
        return self._request("GET", f"/reports/{report_type}/{record_id}/pdf", raw=True)

    # Contact

    def send_contact_message(self, name: str, email: str, message: str) -> ApiResult:
        return self._request("POST", "/contact/", json={"name": name, "email": email, "message": message})
