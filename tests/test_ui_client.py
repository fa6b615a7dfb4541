"""
Tests for the Streamlit-side API client and auth gate, with requests mocked.
"""
import pytest
import requests
from unittest.mock import MagicMock, patch

from app.ui.api_client import ApiClient, ApiResult, error_detail, get_api_base_url
from app.ui.session import AuthState, GateDecision, UISession, gate


def make_response(status_code=200, json_data=None, content=b"{}"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.mark.parametrize("raw,expected", [
    ("", "http://localhost:8000"),
    ("https://api.example.com/", "https://api.example.com"),
    ("http://localhost:9000", "http://localhost:9000"),
    ("api.example.com", "https://api.example.com"),
])
def test_get_api_base_url(monkeypatch, raw, expected):
    monkeypatch.setenv("API_BASE_URL", raw)
    assert get_api_base_url() == expected


class TestErrorDetail:

    def test_string_detail(self):
        assert error_detail(make_response(400, {"detail": "Passwords do not match"})) == "Passwords do not match"

    def test_validation_errors_are_joined(self):
        response = make_response(422, {"detail": [{"msg": "Field required"}, {"msg": "Value error, bad email"}]})
        assert error_detail(response) == "Field required; Value error, bad email"

    def test_non_json_server_error(self):
        response = make_response(502, ValueError("no json"))
        assert error_detail(response) == "Server error. Please try again later."


class TestApiClient:

    def test_sends_bearer_token_and_returns_json(self):
        client = ApiClient(base_url="http://api.test/", token="sess_abc")
        with patch("app.ui.api_client.requests.request") as mock_request:
            mock_request.return_value = make_response(200, {"kpis": {"total": 0}})
            result = client.dashboard()

        assert result.ok is True
        assert result.data == {"kpis": {"total": 0}}
        args, kwargs = mock_request.call_args
        assert args == ("GET", "http://api.test/api/v1/dashboard/")
        assert kwargs["headers"] == {"Authorization": "Bearer sess_abc"}

    def test_error_status_returns_failed_result(self):
        client = ApiClient(base_url="http://api.test")
        with patch("app.ui.api_client.requests.request") as mock_request:
            mock_request.return_value = make_response(401, {"detail": "Failed to authenticate."})
            result = client.login("a@example.com", "wrong")

        assert result.ok is False
        assert result.unauthorized is True
        assert result.error == "Failed to authenticate."

    def test_connection_error_does_not_raise(self):
        client = ApiClient(base_url="http://api.test")
        with patch("app.ui.api_client.requests.request", side_effect=requests.exceptions.ConnectionError("refused")):
            result = client.me()

        assert result.ok is False
        assert result.status_code is None
        assert "Could not reach the server" in result.error

    def test_no_content_and_raw_bytes(self):
        client = ApiClient(base_url="http://api.test", token="t")
        with patch("app.ui.api_client.requests.request") as mock_request:
            mock_request.return_value = make_response(204, content=b"")
            assert client.delete_report("FTA", 3).data is None

            mock_request.return_value = make_response(200, content=b"%PDF-1.4")
            result = client.report_pdf("FTA", 3)
        assert result.data == b"%PDF-1.4"
        assert mock_request.call_args[0][1] == "http://api.test/api/v1/reports/FTA/3/pdf"

    def test_list_reports_params(self):
        client = ApiClient(base_url="http://api.test", token="t")
        with patch("app.ui.api_client.requests.request") as mock_request:
            mock_request.return_value = make_response(200, {"items": []})
            client.list_reports(report_type="K3", search="", page=2)
        assert mock_request.call_args[1]["params"] == {"page": 2, "type": "K3"}


@pytest.mark.parametrize("state,decision", [
    (AuthState.LOADING, GateDecision.SHOW_LOADING),
    (AuthState.UNAUTHENTICATED, GateDecision.REDIRECT_LOGIN),
    (AuthState.AUTHENTICATED, GateDecision.RENDER),
])
def test_gate(state, decision):
    assert gate(state) == decision


class TestUISession:

    def make_session(self, token=None):
        client = MagicMock(spec=ApiClient)
        return UISession(token=token, client=client), client

    def test_no_token_is_unauthenticated(self):
        session, client = self.make_session()
        assert session.refresh() == AuthState.UNAUTHENTICATED
        client.me.assert_not_called()

    def test_valid_token_authenticates(self):
        session, client = self.make_session(token="sess_ok")
        client.me.return_value = ApiResult(ok=True, data={"id": 1, "email": "a@example.com"}, status_code=200)

        assert session.refresh() == AuthState.AUTHENTICATED
        assert session.user["id"] == 1
        assert gate(session.state) == GateDecision.RENDER

    def test_rejected_token_clears_session(self):
        session, client = self.make_session(token="sess_old")
        client.me.return_value = ApiResult(ok=False, error="Invalid or expired session", status_code=401)

        assert session.refresh() == AuthState.UNAUTHENTICATED
        assert session.token is None
        assert client.token is None

    def test_unreachable_server_keeps_token_and_stays_loading(self):
        session, client = self.make_session(token="sess_ok")
        client.me.return_value = ApiResult(ok=False, error="Could not reach the server")

        assert session.refresh() == AuthState.LOADING
        assert session.token == "sess_ok"
        assert gate(session.state) == GateDecision.SHOW_LOADING

    def test_login_and_logout(self):
        session, client = self.make_session()
        client.login.return_value = ApiResult(ok=True, data={"token": "sess_new", "user": {"id": 2}}, status_code=200)

        result = session.login("a@example.com", "pw")
        assert result.ok
        assert session.is_authenticated
        assert client.token == "sess_new"

        session.logout()
        client.logout.assert_called_once()
        assert session.state == AuthState.UNAUTHENTICATED
        assert session.user is None

    def test_failed_login_leaves_state(self):
        session, client = self.make_session()
        client.login.return_value = ApiResult(ok=False, error="Failed to authenticate.", status_code=401)

        result = session.login("a@example.com", "bad")
        assert result.error == "Failed to authenticate."
        assert session.token is None
        assert session.state == AuthState.LOADING
