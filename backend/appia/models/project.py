# appia/models/project.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from appia.models.base import ApiModel


class ProjectCreate(ApiModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    language: str = "react"
    prompt: str = Field(min_length=1)
    code: str = ""
    files: Any = None
    chat_history: List[Any] = Field(default_factory=list)
    is_public: bool = False


class ProjectUpdate(ApiModel):
    user_id: str = Field(min_length=1)
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    language: Optional[str] = None
    prompt: Optional[str] = None
    code: Optional[str] = None
    files: Any = None
    chat_history: Optional[List[Any]] = None
    is_public: Optional[bool] = None


class Project(ApiModel):
    id: str
    user_id: str
    name: str
    description: str
    language: str
    prompt: str
    code: str
    files: Any = None
    chat_history: List[Any] = Field(default_factory=list)
    is_public: bool
    created_at: datetime
    updated_at: datetime
