# appia/services/step_applier.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence

from appia.models.steps import FileNode, Step
from appia.services.coerce import CreateFile, EditFile, decode_step

logger = logging.getLogger(__name__)


class SandboxMirror(Protocol):
    """Live preview environment that receives every file the applier touches."""

    def write_file(self, path: str, content: str) -> None: ...


@dataclass
class AppliedSteps:
    files: List[FileNode]
    steps: List[Step]


def normalize_path(path: str) -> str:
    return "/".join(part for part in path.strip().split("/") if part)


def _find_node(nodes: Sequence[FileNode], path: str) -> Optional[FileNode]:
    for node in nodes:
        if normalize_path(node.path) == path:
            return node
    return None


def find_file(files: Sequence[FileNode], path: str) -> Optional[FileNode]:
    parts = normalize_path(path).split("/")
    level: Sequence[FileNode] = files
    node: Optional[FileNode] = None
    for depth in range(1, len(parts) + 1):
        node = _find_node(level, "/".join(parts[:depth]))
        if node is None:
            return None
        level = node.children or []
    if node is None or node.type != "file":
        return None
    return node


def _create_file(files: List[FileNode], op: CreateFile) -> Optional[str]:
    path = normalize_path(op.path)
    if not path:
        logger.warning(f"Skipping createFile with empty path: {op.path!r}")
        return None

    parts = path.split("/")
    level = files
    for depth in range(1, len(parts)):
        folder_path = "/".join(parts[:depth])
        folder = _find_node(level, folder_path)
        if folder is None:
            folder = FileNode(name=parts[depth - 1], path=folder_path, type="folder", children=[])
            level.append(folder)
        elif folder.type != "folder":
            logger.warning(f"Skipping createFile {path}: {folder_path} is a file")
            return None
        if folder.children is None:
            folder.children = []
        level = folder.children

    existing = _find_node(level, path)
    if existing is None:
        level.append(FileNode(name=parts[-1], path=path, type="file", content=op.content))
    elif existing.type == "file":
        existing.content = op.content
    else:
        logger.warning(f"Skipping createFile {path}: a folder already exists there")
        return None
    return path


def _edit_file(files: List[FileNode], op: EditFile) -> Optional[str]:
    node = find_file(files, op.path)
    if node is None:
        logger.info(f"editFile target not found, skipping: {op.path}")
        return None

    content = node.content or ""
    if op.find not in content:
        logger.info(f"editFile find string not present in {op.path}, skipping")
        return None

    node.content = content.replace(op.find, op.replace, 1)
    return normalize_path(op.path)


def _mirror(sandbox: SandboxMirror, files: List[FileNode], paths: Sequence[str]) -> None:
    for path in paths:
        node = find_file(files, path)
        if node is None:
            continue
        try:
            sandbox.write_file(path, node.content or "")
        except Exception as e:
            logger.error(f"Failed to mirror {path} into sandbox: {e}")


def apply_steps(
    files: Sequence[FileNode],
    steps: Sequence[Step],
    sandbox: Optional[SandboxMirror] = None,
) -> AppliedSteps:
    """
    Apply every pending step, in order, to a copy of ``files``.

    The input tree is left untouched, and all steps of the batch come back
    completed together. Steps that cannot apply are logged no-ops.
    """
    tree = [node.model_copy(deep=True) for node in files]
    touched: Dict[str, None] = {}

    for step in steps:
        if step.status != "pending":
            continue

        op = decode_step(step)
        if isinstance(op, CreateFile):
            path = _create_file(tree, op)
        elif isinstance(op, EditFile):
            path = _edit_file(tree, op)
        else:
            logger.warning(f"Unrecognized step {step.id} ignored: {op.reason}")
            path = None

        if path:
            touched[path] = None

    if sandbox is not None and touched:
        _mirror(sandbox, tree, list(touched))

    completed = [step.model_copy(update={"status": "completed"}) for step in steps]
    return AppliedSteps(files=tree, steps=completed)
