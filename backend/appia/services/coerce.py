# appia/services/coerce.py
"""
Turns model output into Steps and Steps into typed operations.

Two inputs are supported: the JSON patch format (already checked by
appia.services.validation) and the legacy ``<appiaArtifact>`` XML blocks
emitted by full-project generation. Anything the applier cannot act on is
decoded to ``Unrecognized`` instead of being dropped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from appia.models.chat import Patch, StepError
from appia.models.steps import Step, StepType


@dataclass(frozen=True)
class CreateFile:
    path: str
    content: str


@dataclass(frozen=True)
class EditFile:
    path: str
    find: str
    replace: str


@dataclass(frozen=True)
class Unrecognized:
    reason: str
    raw: str = ""


StepOperation = Union[CreateFile, EditFile, Unrecognized]

_ARTIFACT = re.compile(r"<appiaArtifact[^>]*>(.*?)</appiaArtifact>", re.DOTALL)
_ACTION = re.compile(
    r'<appiaAction\s+type="([^"]*)"(?:\s+filePath="([^"]*)")?\s*>(.*?)</appiaAction>',
    re.DOTALL,
)


def decode_step(step: Step) -> StepOperation:
    if step.type == StepType.CREATE_FILE.value:
        if not step.path:
            return Unrecognized(reason="createFile step without a path", raw=step.title)
        return CreateFile(path=step.path, content=step.code or "")

    if step.type == StepType.EDIT_FILE.value:
        if not step.path or not step.find:
            return Unrecognized(reason="editFile step needs path and find", raw=step.title)
        return EditFile(path=step.path, find=step.find, replace=step.replace or "")

    return Unrecognized(reason=f"unsupported step type: {step.type!r}", raw=step.title)


def coerce_patch_to_steps(patch: Patch, start_id: int = 1) -> List[Step]:
    return [
        Step(
            id=start_id + i,
            title=f"Edit {op.path}",
            type=StepType.EDIT_FILE.value,
            path=op.path,
            find=op.find,
            replace=op.replace,
        )
        for i, op in enumerate(patch.ops)
    ]


def parse_artifact(response: str) -> Tuple[List[Step], List[StepError]]:
    """
    Extract createFile steps from the first ``<appiaArtifact>`` block.

    Text around the artifact is ignored. Actions other than ``file``
    (shell commands, for instance) are returned as errors, in order.
    """
    match = _ARTIFACT.search(response or "")
    if not match:
        return [], []

    steps: List[Step] = []
    errors: List[StepError] = []

    for action_type, file_path, body in _ACTION.findall(match.group(1)):
        if action_type == "file" and file_path:
            steps.append(
                Step(
                    id=len(steps) + 1,
                    title=f"Create {file_path}",
                    type=StepType.CREATE_FILE.value,
                    path=file_path,
                    code=body.strip(),
                )
            )
        elif action_type == "file":
            errors.append(StepError(reason="file action without filePath", raw=body.strip()[:200]))
        else:
            errors.append(StepError(reason=f"unsupported action type: {action_type!r}", raw=body.strip()[:200]))

    return steps, errors
