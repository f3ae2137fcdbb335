# appia/routes/chat.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from appia.core.config import Settings
from appia.core.deps import (
    authorize_user,
    enforce_rate_limit,
    get_llm_client,
    get_settings,
    get_usage_tracker,
)
from appia.core.errors import UpstreamError
from appia.models.chat import ChatRequest, ChatResponse, UsageInfo
from appia.services.anthropic_client import AnthropicClient
from appia.services.coerce import coerce_patch_to_steps, parse_artifact
from appia.services.model_router import route_model
from appia.services.prompt_builder import build_model_messages
from appia.services.usage_tracker import UsageTracker
from appia.services.validation import validate_patch_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_rate_limit)],
)
def chat(
    req: ChatRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    client: AnthropicClient = Depends(get_llm_client),
    tracker: UsageTracker = Depends(get_usage_tracker),
):
    user_id = authorize_user(request, req.user_id)

    choice = route_model(
        settings,
        req.prompt_text,
        has_image=bool(req.image_url),
        is_first_turn=req.is_first_turn,
        patch_mode=req.mode == "patch",
    )
    logger.info(f"Chat request from {user_id}: mode={req.mode} tier={choice.tier} model={choice.model}")

    system_prompt, messages = build_model_messages(req)
    completion = client.complete(system_prompt, messages, choice.model, choice.max_tokens)

    usage = UsageInfo(
        input_tokens=completion.input_tokens,
        output_tokens=completion.output_tokens,
        total_tokens=completion.total_tokens,
    )
    if not completion.cached:
        tracker.record_best_effort(
            user_id,
            "chat_patch" if req.mode == "patch" else "chat_generate",
            completion.total_tokens,
            {"model": completion.model, "projectId": req.project_id, "language": req.language},
        )

    if req.mode == "patch":
        result = validate_patch_response(completion.text)
        if not result.valid:
            logger.error(f"Model returned an invalid patch: {result.error}")
            raise UpstreamError("Model returned an invalid patch", upstream_detail=result.error)
        return ChatResponse(
            patch=result.patch,
            steps=coerce_patch_to_steps(result.patch),
            model=completion.model,
            usage=usage,
        )

    steps, errors = parse_artifact(completion.text)
    return ChatResponse(
        response=completion.text,
        steps=steps,
        errors=errors,
        model=completion.model,
        usage=usage,
    )
