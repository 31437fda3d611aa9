"""
Live-preview editor for a project's brand page.
"""

from typing import Any, Optional

from pydantic import ValidationError

from agency.brand_pages.templates import render_brand_page
from agency.client.state import AgencyState, Task
from agency.core.exceptions import InvalidInputError, NotFoundError
from agency.schemas.brand_page import BrandPage, SectionConfig, SectionType
from agency.schemas.common import EntityId


class BrandPageEditor:
    """
    Holds a draft copy of a brand page.

    Edits and previews touch only the draft; save() and publish() send it
    through AgencyState so the project record follows the usual optimistic
    protocol.
    """

    def __init__(self, state: AgencyState, project_id: EntityId, page: Optional[BrandPage] = None):
        self.state = state
        self.project_id = project_id
        if page is None:
            project = state.get_project(project_id)
            if project is None:
                raise NotFoundError(f"No project with id {project_id}")
            try:
                page = BrandPage.from_brand_data(project.brand_data)
            except ValidationError as e:
                raise InvalidInputError("Stored brand page is invalid", details=e.errors(include_url=False))
            if page is None:
                page = BrandPage(id=f"{project_id}-page", brand_name=project.title)
        self.draft = page.model_copy(deep=True)
        self.dirty = False

    def edit(self, **changes: Any) -> BrandPage:
        """Replace top-level fields of the draft; the result is validated as a whole."""
        try:
            self.draft = BrandPage.model_validate({**self.draft.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidInputError("Invalid brand page", details=e.errors(include_url=False))
        self.dirty = True
        return self.draft

    def toggle_section(self, section: SectionType, enabled: bool) -> BrandPage:
        section = SectionType(section)
        sections = [config for config in self.draft.sections if config.type != section]
        order = next(
            (config.order for config in self.draft.sections if config.type == section),
            len(self.draft.sections),
        )
        sections.append(SectionConfig(type=section, enabled=enabled, order=order))
        sections.sort(key=lambda config: config.order)
        self.draft = self.draft.model_copy(update={"sections": sections})
        self.dirty = True
        return self.draft

    def preview(self) -> str:
        """Render the draft without persisting anything."""
        return render_brand_page(self.draft)

    def save(self) -> Task:
        task = self.state.save_brand_page(self.project_id, self.draft)
        self.dirty = False
        return task

    def publish(self) -> Task:
        task = self.state.publish_brand_page(self.project_id, self.draft)
        self.draft = BrandPage.from_brand_data(self.state.get_project(self.project_id).brand_data)
        self.dirty = False
        return task
