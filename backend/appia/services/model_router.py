# appia/services/model_router.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from appia.core.config import Settings

Tier = Literal["cheap", "expensive"]

SHORT_PROMPT_CHARS = 50
LONG_PROMPT_CHARS = 100
MAX_CONJUNCTIONS = 2

HEAVY_KEYWORDS = (
    "create", "build", "generate", "make", "implement", "design",
    "app", "website", "application", "dashboard", "interface",
    "component", "function", "class", "method", "api", "database",
    "authentication", "user management", "backend", "frontend",
    "complex", "advanced", "sophisticated", "comprehensive",
)

SIMPLE_IMAGE_PHRASES = ("put this", "add image", "logo")

_CONJUNCTIONS = re.compile(r"\b(and|also|then|next|additionally)\b", re.IGNORECASE)


@dataclass(frozen=True)
class ModelChoice:
    tier: Tier
    model: str
    max_tokens: int


def is_heavy_task(prompt: str, has_image: bool = False) -> bool:
    if has_image:
        return True

    lowered = prompt.lower()
    if any(keyword in lowered for keyword in HEAVY_KEYWORDS):
        return True
    if len(prompt) > LONG_PROMPT_CHARS:
        return True
    return len(_CONJUNCTIONS.findall(prompt)) > MAX_CONJUNCTIONS


def select_tier(prompt: str, has_image: bool = False, is_first_turn: bool = False) -> Tier:
    if not has_image and not is_first_turn and len(prompt) < SHORT_PROMPT_CHARS:
        return "cheap"

    lowered = prompt.lower()
    if has_image and not is_first_turn and any(p in lowered for p in SIMPLE_IMAGE_PHRASES):
        return "cheap"

    if is_first_turn or is_heavy_task(prompt, has_image):
        return "expensive"
    return "cheap"


def route_model(
    settings: Settings,
    prompt: str,
    has_image: bool = False,
    is_first_turn: bool = False,
    patch_mode: bool = False,
) -> ModelChoice:
    tier = select_tier(prompt, has_image, is_first_turn)
    if tier == "expensive":
        max_tokens = settings.patch_tokens_expensive if patch_mode else settings.max_tokens_expensive
        return ModelChoice(tier=tier, model=settings.model_expensive, max_tokens=max_tokens)

    max_tokens = settings.patch_tokens_cheap if patch_mode else settings.max_tokens_cheap
    return ModelChoice(tier=tier, model=settings.model_cheap, max_tokens=max_tokens)
