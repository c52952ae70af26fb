"""Footer and title templating for generated xref pages."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from jinja2 import Environment, StrictUndefined, TemplateError

from .config import ConfigError
from .models import ProjectDescriptor

Clock = Callable[[], datetime]

DEFAULT_BOTTOM = (
    "Copyright &#169; {inceptionYear}-{currentYear} {projectOrganizationName}. "
    "All Rights Reserved."
)
DEFAULT_TITLE = "{{ project.name }} {{ project.version }} Reference"


class BottomTextTemplater:
    """Renders the copyright line printed at the bottom of every page.

    Placeholders are replaced in a fixed order: ``{currentYear}``, then
    ``{inceptionYear}`` (dropped together with its trailing dash when it is
    missing or equal to the current year), then ``{projectOrganizationName}``
    (dropped together with its leading space when there is no organization).
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or datetime.now

    def render(
        self,
        template: str,
        inception_year: Optional[str] = None,
        organization_name: Optional[str] = None,
    ) -> str:
        year = str(self._clock().year)
        bottom = template.replace("{currentYear}", year)

        if inception_year is None or inception_year == year:
            bottom = bottom.replace("{inceptionYear}-", "")
        else:
            bottom = bottom.replace("{inceptionYear}", inception_year)

        if organization_name and organization_name.strip():
            bottom = bottom.replace("{projectOrganizationName}", organization_name)
        else:
            bottom = bottom.replace(" {projectOrganizationName}", "")

        return bottom

    def render_for(self, template: str, project: ProjectDescriptor) -> str:
        return self.render(template, project.inception_year, project.organization_name)


_TITLE_ENV = Environment(autoescape=False, undefined=StrictUndefined)


def render_title(template: str | None, project: ProjectDescriptor) -> str:
    """Render a window or document title against the project metadata."""
    source = template or DEFAULT_TITLE
    try:
        rendered = _TITLE_ENV.from_string(source).render(project=project)
    except TemplateError as exc:
        raise ConfigError(f"Invalid title template {source!r}: {exc}") from exc
    return " ".join(rendered.split())


__all__ = ["BottomTextTemplater", "Clock", "DEFAULT_BOTTOM", "DEFAULT_TITLE", "render_title"]
