"""Template rendering for notification subjects and bodies."""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import TemplateNotFoundError
from infrastructure.persistence.templates import TemplateStore

logger = get_module_logger()

PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass(frozen=True)
class RenderedTemplate:
    subject: Optional[str]
    body: str


def placeholders(text: Optional[str]) -> List[str]:
    """Unique placeholder names in order of first appearance."""
    names: List[str] = []
    for name in PLACEHOLDER.findall(text or ""):
        if name not in names:
            names.append(name)
    return names


def interpolate(text: str, variables: Dict[str, Any]) -> str:
    """Replace ``{{name}}`` with ``variables[name]``.

    Placeholders without a value are left in place so a partially filled
    template is still readable.
    """

    def replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in variables and variables[name] is not None:
            return str(variables[name])
        return match.group(0)

    return PLACEHOLDER.sub(replace, text)


class TemplateRenderer:
    """Renders stored templates with request data as variables."""

    def __init__(self, store: TemplateStore):
        self.store = store

    def render(self, template_id: str, variables: Dict[str, Any]) -> RenderedTemplate:
        """Render a template.

        Raises:
            TemplateNotFoundError: Unknown or inactive template.
        """
        template = self.store.get(template_id)
        if template is None or not template.is_active:
            logger.warning("template_not_found", template_id=template_id)
            raise TemplateNotFoundError(f"Template {template_id} not found")

        missing = [
            name
            for name in placeholders(template.subject) + placeholders(template.body)
            if name not in variables
        ]
        if missing:
            logger.warning(
                "template_variables_missing",
                template_id=template_id,
                missing=sorted(set(missing)),
            )

        return RenderedTemplate(
            subject=interpolate(template.subject, variables) if template.subject else None,
            body=interpolate(template.body, variables),
        )
