# appia/services/github_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests as http_requests

from appia.core.config import Settings
from appia.core.errors import IntegrationNotConfiguredError, RequestValidationError, UpstreamError

logger = logging.getLogger(__name__)

GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"


class GithubOAuthClient:
    def __init__(self, settings: Settings):
        self.settings = settings

    def exchange_code(self, code: str, state: Optional[str] = None) -> str:
        """Exchange an OAuth ``code`` for an access token."""
        if not self.settings.github_client_id or not self.settings.github_client_secret:
            raise IntegrationNotConfiguredError("GitHub OAuth app not configured")

        try:
            resp = http_requests.post(
                GITHUB_TOKEN_URL,
                headers={"Accept": "application/json"},
                json={
                    "client_id": self.settings.github_client_id,
                    "client_secret": self.settings.github_client_secret,
                    "code": code,
                    "state": state,
                },
                timeout=self.settings.http_timeout,
            )
            resp.raise_for_status()
        except http_requests.RequestException as e:
            raise UpstreamError("GitHub token exchange failed", upstream_detail=str(e)) from e

        data = resp.json()
        if data.get("error"):
            # Bad or expired code: the caller's fault, not GitHub's.
            raise RequestValidationError(data.get("error_description") or data["error"])
        return data["access_token"]

    def get_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        """Return the GitHub user for a token, or None when the token is no longer valid."""
        try:
            resp = http_requests.get(
                GITHUB_USER_URL,
                headers={
                    "Authorization": f"token {access_token}",
                    "Accept": "application/vnd.github.v3+json",
                },
                timeout=self.settings.http_timeout,
            )
        except http_requests.RequestException as e:
            raise UpstreamError("GitHub API request failed", upstream_detail=str(e)) from e

        if resp.status_code in (401, 403):
            return None
        if not resp.ok:
            raise UpstreamError("GitHub API request failed", upstream_detail=resp.text)
        return resp.json()
