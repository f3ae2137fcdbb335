# appia/models/chat.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import AliasChoices, ConfigDict, Field, model_validator

from appia.models.base import ApiModel
from appia.models.steps import Step


class TokenCounts(ApiModel):
    input: int = 0
    output: int = 0
    total: Optional[int] = None


class ChatMessage(ApiModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    # Older clients still send {role, content}
    text: str = Field(validation_alias=AliasChoices("text", "content"))
    image_urls: Optional[List[str]] = None
    tokens: Optional[TokenCounts] = None


class ChatRequest(ApiModel):
    messages: List[ChatMessage] = Field(default_factory=list)
    user_text: Optional[str] = Field(default=None, min_length=1, max_length=10000)
    language: str = "react"
    user_id: str = Field(min_length=1)
    image_url: Optional[str] = None
    project_id: Optional[str] = None
    summary: Optional[str] = None
    mode: Literal["generate", "patch"] = "generate"

    @model_validator(mode="after")
    def _require_prompt(self) -> "ChatRequest":
        if not self.user_text and not any(m.role == "user" for m in self.messages):
            raise ValueError("either userText or at least one user message is required")
        return self

    @property
    def prompt_text(self) -> str:
        if self.user_text:
            return self.user_text
        for message in reversed(self.messages):
            if message.role == "user":
                return message.text
        return ""

    @property
    def is_first_turn(self) -> bool:
        return not any(m.role == "assistant" for m in self.messages)


class PatchOp(ApiModel):
    type: Literal["editFile"] = "editFile"
    path: str
    find: str
    replace: str


class Patch(ApiModel):
    ops: List[PatchOp] = Field(default_factory=list)


class UsageInfo(ApiModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class StepError(ApiModel):
    kind: Literal["unrecognized"] = "unrecognized"
    reason: str
    raw: str = ""


class ChatResponse(ApiModel):
    response: Optional[str] = None
    patch: Optional[Patch] = None
    steps: List[Step] = Field(default_factory=list)
    errors: List[StepError] = Field(default_factory=list)
    model: Optional[str] = None
    usage: Optional[UsageInfo] = None
