# ABOUTME: HTTP client for the Centrify tenant REST API
# ABOUTME: Starts and advances authentication and fetches the SAML application page

"""HTTP gateway to the identity provider."""

from typing import Any
from urllib.parse import urlparse

import requests

from .console import debug_print
from .exceptions import ProtocolError

START_AUTHENTICATION_PATH = "/Security/StartAuthentication"
ADVANCE_AUTHENTICATION_PATH = "/Security/AdvanceAuthentication"
APP_CLICK_PATH = "/uprest/handleAppClick"

REQUEST_TIMEOUT = 30  # seconds

DEFAULT_HEADERS = {
    "X-CENTRIFY-NATIVE-CLIENT": "true",
    "Accept": "application/json",
}


class HttpGateway:
    """Issues requests against one tenant endpoint.

    The gateway never changes its endpoint in place; ``with_endpoint`` returns
    a new gateway sharing the same ``requests.Session``.
    """

    def __init__(self, endpoint: str, session: requests.Session | None = None, timeout: int = REQUEST_TIMEOUT):
        self.endpoint = endpoint.rstrip("/")
        self.http = session or requests.Session()
        self.timeout = timeout

    def with_endpoint(self, endpoint: str) -> "HttpGateway":
        return HttpGateway(endpoint, session=self.http, timeout=self.timeout)

    @property
    def hostname(self) -> str:
        return (urlparse(self.endpoint).hostname or "").lower()

    def start_authentication(self, user: str) -> dict[str, Any]:
        """Call StartAuthentication and return its ``Result`` object."""
        payload = {"User": user, "Version": "1.0"}
        return self._post_json(START_AUTHENTICATION_PATH, payload)

    def advance_authentication(
        self,
        tenant_id: str,
        session_id: str,
        mechanism_id: str,
        action: str,
        answer: str | None = None,
    ) -> dict[str, Any]:
        """Call AdvanceAuthentication and return its ``Result`` object."""
        payload = {
            "TenantId": tenant_id,
            "SessionId": session_id,
            "MechanismId": mechanism_id,
            "Action": action,
        }
        if answer is not None:
            payload["Answer"] = answer
        return self._post_json(ADVANCE_AUTHENTICATION_PATH, payload)

    def handle_app_click(self, bearer_token: str, app_key: str) -> str:
        """Launch the SAML application and return the HTML page carrying the assertion."""
        url = f"{self.endpoint}{APP_CLICK_PATH}"
        debug_print(f"POST {url} (appkey={app_key})")

        try:
            response = self.http.post(
                url,
                params={"appkey": app_key},
                headers={**DEFAULT_HEADERS, "Authorization": f"Bearer {bearer_token}", "Accept": "text/html"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ProtocolError(f"Request to {APP_CLICK_PATH} failed: {e}") from e

        if not response.ok:
            raise ProtocolError(f"{APP_CLICK_PATH} returned HTTP {response.status_code}")

        return response.text

    def _post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.endpoint}{path}"
        # Never log the payload, it may carry a password
        debug_print(f"POST {url} action={payload.get('Action', '-')}")

        try:
            response = self.http.post(url, json=payload, headers=DEFAULT_HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProtocolError(f"Request to {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(f"{path} returned HTTP {response.status_code} with a non-JSON body") from e

        if not isinstance(body, dict):
            raise ProtocolError(f"{path} returned an unexpected response")

        if not body.get("success"):
            message = body.get("Message") or f"HTTP {response.status_code}"
            raise ProtocolError(f"{path} failed: {message}")

        result = body.get("Result")
        if not isinstance(result, dict):
            raise ProtocolError(f"{path} returned no Result")
        return result
