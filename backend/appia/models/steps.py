# appia/models/steps.py
from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field

from appia.models.base import ApiModel


class StepType(str, Enum):
    CREATE_FILE = "createFile"
    EDIT_FILE = "editFile"


class Step(ApiModel):
    id: int = 0
    title: str = ""
    # Left as a plain string so unknown kinds survive until the decoder rejects them.
    type: str
    status: Literal["pending", "completed"] = "pending"
    path: Optional[str] = None
    code: Optional[str] = None
    find: Optional[str] = None
    replace: Optional[str] = None


class FileNode(ApiModel):
    name: str
    path: str
    type: Literal["file", "folder"]
    content: Optional[str] = None
    children: Optional[List[FileNode]] = None


FileNode.model_rebuild()


class ApplyStepsRequest(ApiModel):
    files: List[FileNode] = Field(default_factory=list)
    steps: List[Step]


class ApplyStepsResponse(ApiModel):
    files: List[FileNode]
    steps: List[Step]
