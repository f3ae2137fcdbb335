# appia/routes/template.py
from __future__ import annotations

import logging

from fastapi import APIRouter

from appia.core.languages import get_language_config
from appia.core.prompt import template_prompts, template_ui_prompts
from appia.models.publish import TemplateRequest, TemplateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["template"])


@router.post("/template", response_model=TemplateResponse)
def template(req: TemplateRequest):
    """Canned prompt preamble for the selected language; no model call."""
    config = get_language_config(req.language)
    logger.info(f"Template requested for language={config.name}")
    return TemplateResponse(prompts=template_prompts(config), ui_prompts=template_ui_prompts(config))
