"""
Content block rendering for public project pages.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from markupsafe import Markup

from agency.brand_pages.layouts import env, PROJECT_PAGE_STYLESHEET
from agency.brand_pages.sanitize import (
    font_stack,
    safe_css_color,
    safe_image_url,
    safe_link_url,
    sanitize_font_family,
)
from agency.schemas.project import BlockType, PageBlock
from agency.utils.colors import hex_to_rgb, is_dark
from agency.core.logging import get_logger

logger = get_logger(__name__)


def _swatches(colors: Optional[List[Dict[str, Any]]]) -> List[Dict[str, str]]:
    swatches = []
    for color in colors or []:
        hex_value = safe_css_color(color.get("hex"))
        if not hex_value:
            continue
        swatches.append({
            "name": color.get("name", ""),
            "hex": hex_value,
            "rgb": color.get("rgb") or hex_to_rgb(hex_value),
            "text": "#FFFFFF" if is_dark(hex_value) else "#111111",
        })
    return swatches


def _images(items: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Copy list entries, replacing their image with a vetted URL."""
    return [{**item, "image": safe_image_url(item.get("image"))} for item in items or [] if isinstance(item, dict)]


def _font(font: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    if not font:
        return None
    family = sanitize_font_family(font.get("family") or font.get("name"))
    if not family:
        return None
    return {"name": font.get("name") or family, "stack": font_stack(family)}


def _weights(entries: Optional[List[Any]]) -> List[int]:
    weights = []
    for entry in entries or []:
        raw = entry.get("weight") if isinstance(entry, dict) else entry
        try:
            weights.append(int(raw))
        except (TypeError, ValueError):
            continue
    return weights


BlockContext = Callable[[Dict[str, Any]], Dict[str, Any]]

BLOCK_CONTEXT: Dict[BlockType, BlockContext] = {
    BlockType.HERO: lambda c: {"image": safe_image_url(c.get("background_image"))},
    BlockType.TEXT: lambda c: {},
    BlockType.IMAGE: lambda c: {"image": safe_image_url(c.get("image"))},
    BlockType.GALLERY: lambda c: {
        "images": [url for url in map(safe_image_url, c.get("images") or []) if url],
        "columns": c.get("columns") if isinstance(c.get("columns"), int) and 1 <= c.get("columns") <= 6 else 3,
    },
    BlockType.QUOTE: lambda c: {},
    BlockType.SPLIT: lambda c: {
        "image": safe_image_url(c.get("split_image")),
        "position": "right" if c.get("image_position") == "right" else "left",
    },
    BlockType.STATS: lambda c: {},
    BlockType.VIDEO: lambda c: {"link": safe_link_url(c.get("video_url"))},
    BlockType.CTA: lambda c: {"link": safe_link_url(c.get("button_url"))},
    BlockType.SPACER: lambda c: {
        "height": c.get("height") if isinstance(c.get("height"), int) and 0 <= c.get("height") <= 400 else 80,
    },
    BlockType.BRAND_COVER: lambda c: {"image": safe_image_url(c.get("logo"))},
    BlockType.SECTION_HEADER: lambda c: {},
    BlockType.LOGO_SHOWCASE: lambda c: {"image": safe_image_url(c.get("logo_image"))},
    BlockType.LOGO_GRID: lambda c: {"items": _images(c.get("logo_variants"))},
    BlockType.LOGO_DONTS: lambda c: {"items": _images(c.get("logo_donts"))},
    BlockType.COLOR_PALETTE: lambda c: {
        "palettes": [
            ("Primary Colors", _swatches(c.get("primary_colors"))),
            ("Secondary Colors", _swatches(c.get("secondary_colors"))),
        ],
    },
    BlockType.TYPOGRAPHY_SHOWCASE: lambda c: {
        "fonts": [f for f in (_font(c.get("primary_font")), _font(c.get("secondary_font"))) if f],
        "weights": _weights(c.get("font_weights")),
    },
    BlockType.MOCKUP_GRID: lambda c: {"items": _images(c.get("mockups"))},
}


def render_block(block: Union[PageBlock, Dict[str, Any]]) -> Optional[Markup]:
    """
    Render one content block.

    Returns None (and logs a warning) for block types this renderer does
    not know.
    """
    if isinstance(block, dict):
        block = PageBlock.model_validate(block)
    try:
        block_type = BlockType(block.type)
    except ValueError:
        logger.warning("Skipping unknown block type", extra={"block_id": block.id, "type": block.type})
        return None

    context = BLOCK_CONTEXT[block_type](block.content)
    html = env.get_template(f"blocks/{block_type.value}.html").render(c=block.content, **context)
    return Markup(html)


def render_blocks(blocks: Iterable[Union[PageBlock, Dict[str, Any]]]) -> List[Markup]:
    """Render blocks in their display order, skipping unknown types."""
    parsed = [PageBlock.model_validate(b) if isinstance(b, dict) else b for b in blocks or []]
    rendered = []
    for block in sorted(parsed, key=lambda b: b.order):
        html = render_block(block)
        if html is not None:
            rendered.append(html)
    return rendered


def render_project_page(title: str, blocks: Iterable[Union[PageBlock, Dict[str, Any]]]) -> str:
    """Render a project's content blocks as a standalone HTML document."""
    return env.get_template("document.html").render(
        title=title,
        stylesheet=Markup(PROJECT_PAGE_STYLESHEET),
        body_class="project-page",
        sections=render_blocks(blocks),
    )
