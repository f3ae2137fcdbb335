# appia/core/prompt.py
from __future__ import annotations

import textwrap
from typing import List

from appia.core.languages import LanguageConfig

PATCH_SYSTEM_PROMPT = textwrap.dedent(
    """
    You are Appia. Return only compact JSON patches describing file edits. Do not explain. No prose.

    The response must be a single JSON object matching this JSON Schema:
    {schema_json}

    Example:
    {{"ops": [{{"type": "editFile", "path": "index.html", "find": "<header>", "replace": "<header><img src='URL' class='top-right'/>"}}]}}

    Rules:
    - No extra fields
    - If multiple files change, include multiple ops
    - If nothing needs to change, return {{"ops": []}}
    - find is replaced by exact string match, first occurrence only
    - Include full file paths
    - Keep replacements minimal and precise
    """
).strip()


ARTIFACT_SYSTEM_PROMPT = textwrap.dedent(
    """
    Return the complete project as a single artifact. Wrap it in
    <appiaArtifact id="project" title="..."> ... </appiaArtifact>.

    Inside the artifact, emit one action per file:
    <appiaAction type="file" filePath="src/App.jsx">
    ...full file contents...
    </appiaAction>

    Rules:
    1) filePath is relative to the project root, uses forward slashes, never contains "..".
    2) Always emit the full contents of each file, never a diff.
    3) Always include package.json with "dev", "build" and "preview" scripts.
    4) Text outside the artifact is shown to the user as a short summary.
    """
).strip()


def language_user_prompt(config: LanguageConfig, user_prompt: str) -> str:
    return "\n".join(
        [
            config.base_prompt,
            "",
            f"User Request: {user_prompt}",
            "",
            f"Create a complete, production-ready {config.name} application:",
            f"- Use the {config.framework} framework",
            "- Responsive design, semantic HTML, accessible markup",
            "- Error handling and loading states where appropriate",
            "- Clean component structure and state management",
        ]
    )


def generation_system_prompt(config: LanguageConfig) -> str:
    return f"{config.system_prompt}\n\n{ARTIFACT_SYSTEM_PROMPT}"


def template_prompts(config: LanguageConfig) -> List[str]:
    return [
        f"You are an expert in {config.name}. {config.base_prompt}",
        f"CRITICAL: the project must build with `{config.build_command}` and run with "
        f"`{config.dev_command}`. Include these dependencies: {', '.join(config.dependencies)}.",
        "Here is an artifact that contains all files of the project visible to you.\n"
        "Consider the contents of ALL files in the project.",
    ]


def template_ui_prompts(config: LanguageConfig) -> List[str]:
    return [f"You are an expert in {config.name}. Generate a complete, production-ready web application."]
