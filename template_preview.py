# SPDX-License-Identifier: GPL-3.0-only

from typing import Any, Dict, List, Optional

from jinja2 import DebugUndefined, TemplateError, meta
from jinja2.sandbox import SandboxedEnvironment

from logutils import get_logger
from schemas.v1.models import MailTemplate, TemplatePreview

logger = get_logger(__name__)

# Templates are authored by dashboard users, so they only ever render sandboxed.
# Placeholders without data stay visible as {{ name }} in the preview.
html_env = SandboxedEnvironment(autoescape=True, undefined=DebugUndefined)
text_env = SandboxedEnvironment(autoescape=False, undefined=DebugUndefined)


def template_variables(content: Optional[str]) -> List[str]:
    """Extract all variable names used in a template string."""
    if not content:
        return []
    try:
        ast = text_env.parse(content)
    except TemplateError as e:
        logger.warning("Could not parse template content: %s", e)
        return []
    return sorted(meta.find_undeclared_variables(ast))


def render_text(env: SandboxedEnvironment, text: str, substitutions: Dict[str, Any]) -> str:
    """Render text with substitutions, returning it unchanged if it does not render."""
    try:
        return env.from_string(text).render(substitutions)
    except TemplateError as e:
        logger.warning("Error rendering template text: %s", e)
        return text


def render_preview(
    template: MailTemplate, substitutions: Optional[Dict[str, Any]] = None
) -> TemplatePreview:
    """Render subject, HTML and text parts of a template for preview."""
    substitutions = substitutions or {}

    variables = set(template_variables(template.subject))
    variables.update(template_variables(template.html_content))
    variables.update(template_variables(template.text_content))
    missing = sorted(variables - set(substitutions.keys()))

    if missing:
        logger.debug("Template %s missing variables: %s", template.id, missing)

    text_content = None
    if template.text_content:
        text_content = render_text(text_env, template.text_content, substitutions)

    return TemplatePreview(
        subject=render_text(text_env, template.subject, substitutions),
        html_content=render_text(html_env, template.html_content, substitutions),
        text_content=text_content,
        variables=sorted(variables),
        missing_variables=missing,
    )
