# appia/services/expo_client.py
from __future__ import annotations

import logging
from typing import Any, Dict

import requests as http_requests

from appia.core.config import Settings
from appia.core.errors import UpstreamError

logger = logging.getLogger(__name__)

EXPO_SNACK_API_URL = "https://snack.expo.dev/api/v2/snacks"


def create_snack(settings: Settings, files: Dict[str, Any], name: str, description: str) -> Dict[str, str]:
    """Create an Expo Snack from generated React Native files and return its URLs."""
    logger.info(f"Creating Expo Snack with {len(files)} files")
    try:
        resp = http_requests.post(
            EXPO_SNACK_API_URL,
            json={
                "name": name,
                "description": description,
                "files": files,
                # Snack resolves dependencies from imports
                "dependencies": {},
            },
            timeout=settings.http_timeout,
        )
    except http_requests.RequestException as e:
        raise UpstreamError("Failed to create Expo Snack", upstream_detail=str(e)) from e

    if not resp.ok:
        logger.error(f"Expo Snack API error {resp.status_code}: {resp.text}")
        raise UpstreamError("Failed to create Expo Snack", upstream_detail=resp.text)

    snack_id = resp.json()["id"]
    snack = {
        "id": snack_id,
        "snack_url": f"https://snack.expo.dev/{snack_id}",
        "embed_url": f"https://snack.expo.dev/embedded/@snack/{snack_id}?preview=true&platform=ios",
    }
    logger.info(f"Expo Snack created: {snack['snack_url']}")
    return snack
