# appia/routes/files.py
from __future__ import annotations

from fastapi import APIRouter

from appia.models.steps import ApplyStepsRequest, ApplyStepsResponse
from appia.services.step_applier import apply_steps

router = APIRouter(prefix="/api/files", tags=["files"])


@router.post("/apply", response_model=ApplyStepsResponse, response_model_exclude_none=True)
def apply(req: ApplyStepsRequest):
    result = apply_steps(req.files, req.steps)
    return ApplyStepsResponse(files=result.files, steps=result.steps)
