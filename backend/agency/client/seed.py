"""
The showcase project that is always present in the project collection.
"""

from agency.core.config import settings
from agency.models.project import ProjectStatus
from agency.schemas.brand_page import (
    BrandPage,
    BrandFont,
    BrandFonts,
    ColorPalette,
    ColorSwatch,
    TemplateId,
)
from agency.schemas.project import ProjectResponse


def demo_brand_page() -> BrandPage:
    return BrandPage(
        id=f"{settings.DEMO_PROJECT_ID}-page",
        brand_name="Studio Showcase",
        tagline="Identity, motion and print for independent brands",
        story="A sample brand used to preview every template.\n\nEdit it freely; it cannot be deleted.",
        fonts=BrandFonts(
            heading=BrandFont(name="Playfair Display", weights=[400, 700]),
            body=BrandFont(name="Inter", weights=[400, 500]),
        ),
        colors=ColorPalette(
            primary="#A62932",
            accent="#A62932",
            colors=[
                ColorSwatch(name="Crimson", hex="#A62932"),
                ColorSwatch(name="Ink", hex="#1A1A1A"),
                ColorSwatch(name="Paper", hex="#F5F0E8"),
            ],
        ),
        template=TemplateId.EDITORIAL_LUXURY.value,
    )


def demo_project() -> ProjectResponse:
    """A fresh copy of the showcase project."""
    return ProjectResponse(
        id=settings.DEMO_PROJECT_ID,
        title="Studio Showcase",
        client="Studio",
        category="Brand Identity",
        year="2024",
        description="Showcase project demonstrating the brand page builder.",
        status=ProjectStatus.COMPLETED,
        progress=100,
        brand_data=demo_brand_page().to_brand_data(),
        linked_brand_page_id=f"{settings.DEMO_PROJECT_ID}-page",
        is_page_published=True,
    )
