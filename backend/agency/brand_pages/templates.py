"""
Brand page template registry and renderers.

Every template is a BrandPageRenderer subclass registered under its
template id. Rendering looks the id up and falls back to the default
template when the id is unknown or missing.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

from markupsafe import Markup

from agency.brand_pages.layouts import env
from agency.brand_pages.sanitize import (
    build_font_face,
    font_stack,
    safe_css_color,
    safe_image_url,
    sanitize_font_family,
)
from agency.schemas.brand_page import (
    BrandPage,
    BrandFont,
    SectionType,
    TemplateId,
    DEFAULT_TEMPLATE,
)
from agency.utils.colors import is_dark
from agency.core.logging import get_logger

logger = get_logger(__name__)

STANDARD_SECTIONS = (
    SectionType.HERO,
    SectionType.LOGO,
    SectionType.COLORS,
    SectionType.TYPOGRAPHY,
    SectionType.STORY,
    SectionType.MOCKUPS,
    SectionType.FOOTER,
)

_REGISTRY: Dict[str, Type["BrandPageRenderer"]] = {}


def register(renderer_cls: Type["BrandPageRenderer"]) -> Type["BrandPageRenderer"]:
    """Class decorator adding a renderer to the registry."""
    _REGISTRY[renderer_cls.template_id.value] = renderer_cls
    return renderer_cls


class BrandPageRenderer:
    """
    Base renderer. Subclasses set the template id, theme and section order.

    Sections are rendered in the page's configured order when it has one,
    otherwise in the renderer's default order. Disabled sections are left
    out of the document.
    """

    template_id: TemplateId = DEFAULT_TEMPLATE
    default_sections: Tuple[SectionType, ...] = STANDARD_SECTIONS
    theme: Dict[str, str] = {
        "background": "#FFFFFF",
        "text": "#111111",
        "accent": "#A62932",
        "heading_weight": "700",
        "radius": "0",
        "heading_fallback": "serif",
        "body_fallback": "sans-serif",
    }

    def section_order(self, page: BrandPage) -> List[SectionType]:
        """Sections to render, in order."""
        configured = {config.type: config.order for config in page.sections}
        ranked = sorted(
            self.default_sections,
            key=lambda s: (configured.get(s, len(self.default_sections) + 1), self.default_sections.index(s)),
        ) if configured else list(self.default_sections)
        return [section for section in ranked if page.is_section_enabled(section) and self.has_content(page, section)]

    def has_content(self, page: BrandPage, section: SectionType) -> bool:
        if section == SectionType.SOCIAL_STRATEGY:
            return page.extensions.social_strategy is not None
        return True

    def colors(self, page: BrandPage) -> Dict[str, str]:
        palette = page.colors
        return {
            "background": self.theme["background"],
            "text": self.theme["text"],
            "accent": safe_css_color(palette.accent or palette.primary, self.theme["accent"]),
            "heading_weight": self.theme["heading_weight"],
            "radius": self.theme["radius"],
        }

    def _font_entry(self, font: Optional[BrandFont], fallback: str) -> Optional[Dict[str, Any]]:
        if not font:
            return None
        family = sanitize_font_family(font.name)
        if not family:
            return None
        return {"family": family, "stack": font_stack(family, fallback), "weights": font.weights}

    def assets(self, page: BrandPage) -> Dict[str, Any]:
        """Sanitized URLs and derived values the section templates read."""
        logos = {
            variant: safe_image_url(url)
            for variant, url in page.logos.model_dump().items()
            if safe_image_url(url)
        }
        fonts = []
        for role, font, fallback in (
            ("Heading", page.fonts.heading, self.theme["heading_fallback"]),
            ("Body", page.fonts.body, self.theme["body_fallback"]),
        ):
            entry = self._font_entry(font, fallback)
            if entry:
                fonts.append((role, entry))
        return {
            "logos": logos,
            "fonts": fonts,
            "colors": [
                {
                    "name": swatch.name,
                    "hex": swatch.hex,
                    "rgb": swatch.rgb,
                    "text": "#FFFFFF" if is_dark(swatch.hex) else "#111111",
                }
                for swatch in page.colors.colors
            ],
            "mockups": [
                {"url": safe_image_url(m.url), "label": m.label, "category": m.category}
                for m in page.mockups
                if safe_image_url(m.url)
            ],
            "story_image": safe_image_url(page.story_image),
        }

    def stylesheet(self, page: BrandPage) -> Markup:
        font_faces = []
        for font in (page.fonts.heading, page.fonts.body):
            if font and font.file:
                rule = build_font_face(font.name, font.file)
                if rule:
                    font_faces.append(rule)
                else:
                    logger.warning(
                        "Font file rejected",
                        extra={"page_id": page.id, "font": sanitize_font_family(font.name)},
                    )
        heading = page.fonts.heading.name if page.fonts.heading else None
        body = page.fonts.body.name if page.fonts.body else None
        css = env.get_template("stylesheet.css").render(
            font_faces="\n        ".join(font_faces),
            theme=self.colors(page),
            heading_font=font_stack(heading, self.theme["heading_fallback"]),
            body_font=font_stack(body, self.theme["body_fallback"]),
        )
        return Markup(css)

    def render(self, page: BrandPage) -> str:
        """Render the page as a standalone HTML document."""
        assets = self.assets(page)
        sections = [
            Markup(env.get_template(f"sections/{section.value}.html").render(page=page, assets=assets))
            for section in self.section_order(page)
        ]
        return env.get_template("document.html").render(
            title=page.brand_name,
            stylesheet=self.stylesheet(page),
            body_class=f"template-{self.template_id.value}",
            sections=sections,
        )


@register
class EditorialLuxuryRenderer(BrandPageRenderer):
    template_id = TemplateId.EDITORIAL_LUXURY
    theme = {
        **BrandPageRenderer.theme,
        "background": "#F5F0E8",
        "text": "#1A1A1A",
        "heading_weight": "400",
    }


@register
class MinimalCleanRenderer(BrandPageRenderer):
    template_id = TemplateId.MINIMAL_CLEAN
    default_sections = (
        SectionType.HERO,
        SectionType.LOGO,
        SectionType.COLORS,
        SectionType.TYPOGRAPHY,
        SectionType.MOCKUPS,
        SectionType.STORY,
        SectionType.FOOTER,
    )
    theme = {
        **BrandPageRenderer.theme,
        "background": "#FFFFFF",
        "text": "#222222",
        "heading_weight": "300",
        "heading_fallback": "sans-serif",
    }


@register
class TechModernRenderer(BrandPageRenderer):
    template_id = TemplateId.TECH_MODERN
    theme = {
        **BrandPageRenderer.theme,
        "background": "#0B0F19",
        "text": "#E6EDF3",
        "accent": "#3B82F6",
        "radius": "12px",
        "heading_fallback": "monospace",
    }


@register
class OrganicNaturalRenderer(BrandPageRenderer):
    template_id = TemplateId.ORGANIC_NATURAL
    default_sections = (
        SectionType.HERO,
        SectionType.STORY,
        SectionType.LOGO,
        SectionType.COLORS,
        SectionType.TYPOGRAPHY,
        SectionType.MOCKUPS,
        SectionType.FOOTER,
    )
    theme = {
        **BrandPageRenderer.theme,
        "background": "#F1EDE4",
        "text": "#2F3A2F",
        "accent": "#6B8E4E",
        "radius": "24px",
    }


@register
class BoldPlayfulRenderer(BrandPageRenderer):
    template_id = TemplateId.BOLD_PLAYFUL
    theme = {
        **BrandPageRenderer.theme,
        "background": "#FFE14D",
        "text": "#111111",
        "accent": "#FF3366",
        "heading_weight": "900",
        "radius": "32px",
    }


@register
class SocialMediaRenderer(BrandPageRenderer):
    """The only template with a social strategy section."""
    template_id = TemplateId.SOCIAL_MEDIA
    default_sections = (
        SectionType.HERO,
        SectionType.LOGO,
        SectionType.COLORS,
        SectionType.TYPOGRAPHY,
        SectionType.SOCIAL_STRATEGY,
        SectionType.MOCKUPS,
        SectionType.FOOTER,
    )
    theme = {
        **BrandPageRenderer.theme,
        "background": "#FAFAFA",
        "text": "#141414",
        "accent": "#E1306C",
        "radius": "16px",
        "heading_fallback": "sans-serif",
    }


def available_templates() -> List[str]:
    """Registered template ids."""
    return list(_REGISTRY)


def get_renderer(template_id: Optional[str]) -> BrandPageRenderer:
    """
    Return the renderer for a template id.

    Unknown or missing ids resolve to the default template.
    """
    renderer_cls = _REGISTRY.get(template_id or "")
    if renderer_cls is None:
        logger.warning(
            "Unknown brand page template, using default",
            extra={"template": template_id, "default": DEFAULT_TEMPLATE.value},
        )
        renderer_cls = _REGISTRY[DEFAULT_TEMPLATE.value]
    return renderer_cls()


def render_brand_page(page: BrandPage) -> str:
    """Render a brand page with its selected template."""
    return get_renderer(page.template).render(page)
