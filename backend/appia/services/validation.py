# appia/services/validation.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from appia.models.chat import Patch, PatchOp

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class PatchValidation:
    valid: bool
    patch: Optional[Patch] = None
    error: Optional[str] = None


def _strip_fence(raw: str) -> str:
    text = raw.strip()
    match = _FENCE.match(text)
    return match.group(1) if match else text


def _check_patch(obj: Any) -> None:
    if not isinstance(obj, dict):
        raise ValueError("Response must be a JSON object")
    if "ops" not in obj or not isinstance(obj["ops"], list):
        raise ValueError("Missing or invalid ops array")

    for i, op in enumerate(obj["ops"]):
        if not isinstance(op, dict):
            raise ValueError(f"ops[{i}] must be object")

        kind = op.get("type", op.get("kind"))
        if kind != "editFile":
            raise ValueError(f"ops[{i}] has invalid operation type: {kind!r}")

        for k in ("path", "find", "replace"):
            value = op.get(k)
            if not isinstance(value, str) or not value:
                raise ValueError(f"ops[{i}].{k} must be a non-empty string")


def validate_patch_response(raw: str) -> PatchValidation:
    """
    Decode a model response into a Patch. Never raises: any malformed
    shape comes back as ``valid=False`` with a readable reason.
    """
    try:
        obj: Dict[str, Any] = json.loads(_strip_fence(raw or ""))
    except (TypeError, ValueError, RecursionError) as e:
        return PatchValidation(valid=False, error=f"Invalid JSON: {e}")

    try:
        _check_patch(obj)
    except ValueError as e:
        return PatchValidation(valid=False, error=str(e))

    ops = [PatchOp(path=op["path"], find=op["find"], replace=op["replace"]) for op in obj["ops"]]
    return PatchValidation(valid=True, patch=Patch(ops=ops))
