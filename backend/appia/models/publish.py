# appia/models/publish.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from appia.models.base import ApiModel


class PublishRequest(ApiModel):
    user_id: str = Field(min_length=1)
    project_id: Optional[str] = None
    project_name: str = Field(min_length=1, max_length=200)
    files: Dict[str, str] = Field(min_length=1)
    environment_variables: Optional[Dict[str, str]] = None
    framework: Optional[Literal["react", "nextjs", "vue", "static"]] = None


class PublishResponse(ApiModel):
    success: bool = True
    url: str
    deployment_id: str
    message: str = "Project deployed successfully"


class DeploymentStatus(ApiModel):
    success: bool = True
    deployment: Dict[str, Any]


class ExpoSnackRequest(ApiModel):
    files: Dict[str, Any] = Field(min_length=1)
    name: str = "Appia Generated App"
    description: str = "Created with Appia Builder"


class ExpoSnackResponse(ApiModel):
    success: bool = True
    snack_url: str
    embed_url: str
    id: str


class GithubConnectRequest(ApiModel):
    user_id: str = Field(min_length=1)
    code: str = Field(min_length=1)
    state: Optional[str] = None


class GithubUser(ApiModel):
    id: int
    username: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    connected_at: Optional[datetime] = None


class GithubConnectResponse(ApiModel):
    success: bool = True
    github_user: GithubUser


class GithubStatus(ApiModel):
    connected: bool
    github_user: Optional[GithubUser] = None


class TemplateRequest(ApiModel):
    prompt: str = ""
    language: str = "react"


class TemplateResponse(ApiModel):
    prompts: List[str]
    ui_prompts: List[str]
