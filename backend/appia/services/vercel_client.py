# appia/services/vercel_client.py
"""
Vercel deployment integration: inline file upload, status lookup, delete.
"""
from __future__ import annotations

import base64
import logging
import re
from typing import Any, Dict, Optional

import requests as http_requests

from appia.core.config import Settings
from appia.core.errors import IntegrationNotConfiguredError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

VERCEL_API_URL = "https://api.vercel.com"


def vercel_project_name(name: str) -> str:
    return re.sub(r"[^a-z0-9-]", "-", name.lower())


class VercelClient:
    def __init__(self, settings: Settings):
        self.settings = settings

    def _headers(self) -> Dict[str, str]:
        if not self.settings.vercel_token:
            raise IntegrationNotConfiguredError("Vercel API token not configured")
        return {
            "Authorization": f"Bearer {self.settings.vercel_token}",
            "Content-Type": "application/json",
        }

    def _params(self) -> Dict[str, str]:
        return {"teamId": self.settings.vercel_team_id} if self.settings.vercel_team_id else {}

    def _error_detail(self, resp: http_requests.Response) -> str:
        try:
            return ((resp.json() or {}).get("error") or {}).get("message") or resp.text
        except ValueError:
            return resp.text

    def deploy(
        self,
        project_name: str,
        files: Dict[str, str],
        environment_variables: Optional[Dict[str, str]] = None,
        framework: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a deployment from in-memory files.

        Returns ``{"url": "https://...", "deployment_id": "..."}``.
        """
        headers = self._headers()
        payload: Dict[str, Any] = {
            "name": vercel_project_name(project_name),
            "files": [
                {"file": path, "data": base64.b64encode(content.encode("utf-8")).decode("ascii"), "encoding": "base64"}
                for path, content in files.items()
            ],
            "projectSettings": {"framework": framework or "vite"},
        }
        if environment_variables:
            payload["env"] = environment_variables

        logger.info(f"Starting Vercel deployment for {payload['name']} ({len(files)} files)")
        try:
            resp = http_requests.post(
                f"{VERCEL_API_URL}/v13/deployments",
                headers=headers,
                params=self._params(),
                json=payload,
                timeout=self.settings.http_timeout,
            )
        except http_requests.RequestException as e:
            raise UpstreamError("Deployment failed", upstream_detail=str(e)) from e

        if resp.status_code not in (200, 201):
            detail = self._error_detail(resp)
            logger.error(f"Vercel deployment failed ({resp.status_code}): {detail}")
            raise UpstreamError("Deployment failed", upstream_detail=detail)

        deployment = resp.json()
        logger.info(f"Vercel deployment created: {deployment.get('id')} {deployment.get('url')}")
        return {"url": f"https://{deployment['url']}", "deployment_id": deployment["id"]}

    def get_deployment(self, deployment_id: str) -> Dict[str, Any]:
        headers = self._headers()
        try:
            resp = http_requests.get(
                f"{VERCEL_API_URL}/v13/deployments/{deployment_id}",
                headers=headers,
                params=self._params(),
                timeout=self.settings.http_timeout,
            )
        except http_requests.RequestException as e:
            raise UpstreamError("Failed to get deployment status", upstream_detail=str(e)) from e

        if resp.status_code == 404:
            raise NotFoundError("Deployment not found")
        if resp.status_code != 200:
            raise UpstreamError("Failed to get deployment status", upstream_detail=self._error_detail(resp))
        return resp.json()

    def delete_deployment(self, deployment_id: str) -> None:
        headers = self._headers()
        try:
            resp = http_requests.delete(
                f"{VERCEL_API_URL}/v13/deployments/{deployment_id}",
                headers=headers,
                params=self._params(),
                timeout=self.settings.http_timeout,
            )
        except http_requests.RequestException as e:
            raise UpstreamError("Failed to delete deployment", upstream_detail=str(e)) from e

        if resp.status_code == 404:
            raise NotFoundError("Deployment not found")
        if resp.status_code not in (200, 204):
            raise UpstreamError("Failed to delete deployment", upstream_detail=self._error_detail(resp))
        logger.info(f"Deployment deleted: {deployment_id}")
