# appia/services/anthropic_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

import anthropic

from appia.core.config import Settings
from appia.core.errors import IntegrationNotConfiguredError, RateLimitError, UpstreamError
from appia.services.response_cache import ResponseCache, cache_key

logger = logging.getLogger(__name__)

# USD per million input tokens, rough estimate for logs only
ESTIMATED_INPUT_COST_PER_MTOK: Dict[str, float] = {
    "claude-3-5-haiku-20241022": 0.25,
    "claude-sonnet-4-20250514": 3.0,
}


@dataclass(frozen=True)
class Completion:
    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    cached: bool = False

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


def estimate_cost(total_tokens: int, model: str) -> float:
    rate = ESTIMATED_INPUT_COST_PER_MTOK.get(model, ESTIMATED_INPUT_COST_PER_MTOK["claude-sonnet-4-20250514"])
    return total_tokens * rate / 1_000_000


def split_system_notes(system: str, messages: List[Dict[str, Any]]) -> Tuple[str, List[Dict[str, Any]]]:
    """The Messages API takes no ``system`` role; fold such notes into the system prompt."""
    notes = [str(m["content"]) for m in messages if m.get("role") == "system"]
    rest = [m for m in messages if m.get("role") != "system"]
    return "\n\n".join(part for part in [system, *notes] if part), rest


class AnthropicClient:
    def __init__(
        self,
        settings: Settings | None = None,
        cache: Optional[ResponseCache[Completion]] = None,
        client: Optional[anthropic.Anthropic] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.cache = cache
        self._client = client

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            if not self.settings.anthropic_api_key:
                raise IntegrationNotConfiguredError("Model provider is not configured")
            self._client = anthropic.Anthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.anthropic_timeout,
            )
        return self._client

    def complete(
        self,
        system: str,
        messages: List[Dict[str, Any]],
        model: str,
        max_tokens: int,
    ) -> Completion:
        system, messages = split_system_notes(system, messages)

        key = cache_key(model, system, messages, max_tokens)
        if self.cache is not None:
            hit = self.cache.get(key)
            if hit is not None:
                logger.info(f"Cache hit for model request ({model})")
                return replace(hit, cached=True)

        client = self._get_client()
        logger.debug(f"Sending {len(messages)} messages to {model} (max_tokens={max_tokens})")

        try:
            response = client.messages.create(
                model=model,
                max_tokens=max_tokens,
                system=system,
                messages=messages,
            )
        except anthropic.RateLimitError as e:
            logger.warning(f"Model provider rate limited the request: {e}")
            raise RateLimitError("Model provider rate limit reached, please try again later") from e
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error for model {model}: {e}")
            raise UpstreamError("Failed to get response from the model", upstream_detail=str(e)) from e

        text = "".join(getattr(block, "text", "") for block in response.content if block.type == "text")
        usage = getattr(response, "usage", None)
        completion = Completion(
            text=text,
            model=model,
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
        )
        log_token_usage(completion)

        if self.cache is not None:
            self.cache.put(key, completion)
        return completion


def log_token_usage(completion: Completion) -> None:
    logger.info(
        f"Model usage: {completion.total_tokens} tokens "
        f"({completion.input_tokens} in, {completion.output_tokens} out), "
        f"model={completion.model}, est. cost=${estimate_cost(completion.total_tokens, completion.model):.4f}"
    )
