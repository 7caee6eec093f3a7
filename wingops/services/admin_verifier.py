"""Admin account verification against the running API."""

from typing import Callable, Optional

import requests

from wingops.constants import ADMIN_ROLE, HTTP_TIMEOUT_SECONDS, LOGIN_PATH
from wingops.exceptions import ParseError
from wingops.logger import OpsLogger
from wingops.models.results import ValidationResult
from wingops.services.jwt_inspector import decode_jwt_payload, extract_roles


class AdminVerifier:
    """Logs in as the admin account and checks the token carries the Admin role."""

    def __init__(
        self,
        logger: Optional[OpsLogger] = None,
        http_post: Callable[..., requests.Response] = requests.post,
    ):
        self.logger = logger
        self.http_post = http_post

    def verify(self, api_url: str, email: str, password: str) -> ValidationResult:
        result = ValidationResult()
        url = f"{api_url.rstrip('/')}{LOGIN_PATH}"

        try:
            response = self.http_post(
                url,
                json={"email": email, "password": password},
                timeout=HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            result.add_issue(f"Login request failed: {e}")
            return result

        if response.status_code != 200:
            result.add_issue(f"Login rejected with HTTP {response.status_code}")
            return result

        if self.logger:
            self.logger.success(f"Login accepted for {email}")

        try:
            token = response.json().get("token")
        except ValueError:
            token = None

        if not token:
            result.add_issue("Login response contained no token")
            return result

        try:
            payload = decode_jwt_payload(token)
        except ParseError as e:
            result.add_issue(e.message)
            return result

        roles = extract_roles(payload)
        if ADMIN_ROLE not in roles:
            result.add_issue(
                f"Token for {email} lacks the {ADMIN_ROLE} role (roles: {', '.join(roles) or 'none'})"
            )
        elif self.logger:
            self.logger.success(f"Token carries the {ADMIN_ROLE} role")

        if payload.get("email") and payload["email"].lower() != email.lower():
            result.add_warning(f"Token email {payload['email']} differs from {email}")

        return result
