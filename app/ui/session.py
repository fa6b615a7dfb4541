"""
Client-side authentication gate.

The UI keeps one UISession per browser session. Protected pages call
``gate()`` and act on the returned decision instead of reading ambient state.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from app.ui.api_client import ApiClient, ApiResult


class AuthState(str, enum.Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class GateDecision(str, enum.Enum):
    RENDER = "render"
    REDIRECT_LOGIN = "redirect_login"
    SHOW_LOADING = "show_loading"


def gate(state: AuthState) -> GateDecision:
    """What a protected page should do in the given auth state."""
    if state == AuthState.LOADING:
        return GateDecision.SHOW_LOADING
    if state == AuthState.UNAUTHENTICATED:
        return GateDecision.REDIRECT_LOGIN
    return GateDecision.RENDER


@dataclass
class UISession:
    """Token and current user of one browser session."""
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    state: AuthState = AuthState.LOADING
    client: ApiClient = field(default_factory=ApiClient)

    def __post_init__(self):
        self.client.token = self.token

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    def refresh(self) -> AuthState:
        """Validate the stored token against /auth/me."""
        if not self.token:
            self._clear()
            return self.state
        result = self.client.me()
        if result.ok:
            self.user = result.data
            self.state = AuthState.AUTHENTICATED
        elif result.unauthorized:
            self._clear()
        else:
            # Server unreachable: keep the token, stay in loading so the page can retry
            self.state = AuthState.LOADING
        return self.state

    def login(self, email: str, password: str) -> ApiResult:
        result = self.client.login(email, password)
        if result.ok:
            self._authenticate(result.data)
        return result

    def register(self, name: str, email: str, password: str, password_confirm: str) -> ApiResult:
        result = self.client.register(name, email, password, password_confirm)
        if result.ok:
            self._authenticate(result.data)
        return result

    def logout(self) -> None:
        if self.token:
            self.client.logout()
        self._clear()

    def _authenticate(self, data: Dict[str, Any]) -> None:
        self.token = data["token"]
        self.user = data["user"]
        self.client.token = self.token
        self.state = AuthState.AUTHENTICATED

    def _clear(self) -> None:
        self.token = None
        self.user = None
        self.client.token = None
        self.state = AuthState.UNAUTHENTICATED
