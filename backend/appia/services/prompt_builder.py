# appia/services/prompt_builder.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from appia.core.languages import get_language_config
from appia.core.prompt import PATCH_SYSTEM_PROMPT, generation_system_prompt, language_user_prompt
from appia.core.schema import PATCH_RESPONSE_SCHEMA
from appia.models.chat import ChatMessage, ChatRequest

MAX_USER_TEXT_CHARS = 1000
MAX_SUMMARY_CHARS = 240
DEFAULT_MAX_RECENT = 4


def build_prompt(
    user_text: str,
    image_url: Optional[str] = None,
    summary: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Slim single-turn payload: text, then image, then project summary.
    Inputs are truncated, never rejected.
    """
    content: List[Dict[str, Any]] = [{"type": "text", "text": (user_text or "")[:MAX_USER_TEXT_CHARS]}]

    if image_url:
        content.append({"type": "image", "source": {"type": "url", "url": image_url}})

    if summary:
        content.append({"type": "text", "text": f"Project summary: {summary[:MAX_SUMMARY_CHARS]}"})

    return [{"role": "user", "content": content}]


def summarize_history(messages: Sequence[ChatMessage]) -> str:
    if not messages:
        return "No previous context."

    user_requests = [m.text for m in messages if m.role == "user"][:3]
    assistant_replies = sum(1 for m in messages if m.role == "assistant")

    return (
        f"User made {len(user_requests)} previous requests: {'; '.join(user_requests)}. "
        f"Assistant provided {assistant_replies} responses."
    )


def build_prompt_context(
    messages: Sequence[ChatMessage],
    max_recent: int = DEFAULT_MAX_RECENT,
) -> List[Dict[str, Any]]:
    """
    Keep the last ``max_recent`` messages verbatim; everything older becomes
    one synthetic system note. Lossy on purpose.
    """
    if len(messages) <= max_recent:
        return [{"role": m.role, "content": m.text} for m in messages]

    split = len(messages) - max(max_recent, 0)
    older, recent = messages[:split], messages[split:]
    note = {"role": "system", "content": f"Previous context: {summarize_history(older)}"}
    return [note] + [{"role": m.role, "content": m.text} for m in recent]


def build_model_messages(req: ChatRequest) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Returns ``(system_prompt, messages)`` for one chat turn.

    Patch mode sends only the slim prompt. Generate mode sends the
    summarized history followed by the language-templated latest request.
    """
    if req.mode == "patch":
        schema_json = json.dumps(PATCH_RESPONSE_SCHEMA, ensure_ascii=False, separators=(",", ":"))
        system_prompt = PATCH_SYSTEM_PROMPT.format(schema_json=schema_json)
        return system_prompt, build_prompt(req.prompt_text, req.image_url, req.summary)

    config = get_language_config(req.language)
    system_prompt = generation_system_prompt(config)

    history = list(req.messages)
    if not req.user_text and history and history[-1].role == "user":
        # The latest user turn is rebuilt below with the language template.
        history = history[:-1]

    messages = build_prompt_context(history)
    latest = build_prompt(req.prompt_text, req.image_url, req.summary)[0]
    latest["content"][0]["text"] = language_user_prompt(config, latest["content"][0]["text"])
    messages.append(latest)

    return system_prompt, messages
