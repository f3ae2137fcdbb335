# appia/core/schema.py
from __future__ import annotations

from typing import Any, Dict

PATCH_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["ops"],
    "properties": {
        "ops": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": ["type", "path", "find", "replace"],
                "properties": {
                    "type": {"type": "string", "enum": ["editFile"]},
                    "path": {"type": "string", "minLength": 1},
                    "find": {"type": "string", "minLength": 1},
                    "replace": {"type": "string", "minLength": 1},
                },
            },
        },
    },
}
