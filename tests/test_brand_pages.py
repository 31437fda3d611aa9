"""
Brand page rendering and sanitization tests.
"""

import pytest

from agency.brand_pages.sanitize import (
    build_font_face,
    is_safe_font_url,
    safe_css_color,
    safe_image_url,
    safe_link_url,
    sanitize_font_family,
)
from agency.brand_pages.templates import available_templates, get_renderer, render_brand_page
from agency.schemas.brand_page import BrandPage, SectionConfig, SectionType


def _page(**fields):
    data = {
        "id": "page-1",
        "brand_name": "Northwind",
        "tagline": "Quiet confidence",
        "story": "First paragraph.\n\nSecond paragraph.",
        "colors": {"colors": [{"name": "Navy", "hex": "112233"}]},
    }
    data.update(fields)
    return BrandPage.model_validate(data)


def test_font_family_loses_css_breakout_characters():
    assert sanitize_font_family("Evil'; } body { color: red") == "Evil body color: red"
    assert sanitize_font_family('A"B\\C<script>') == "ABCscript"
    assert sanitize_font_family(None) == ""


@pytest.mark.parametrize("url", [
    "/fonts/brand.woff2",
    "data:font/woff2;base64,AAAA",
    "blob:https://studio.test/123",
    "https://studio.test/fonts/brand.woff2",
])
def test_font_urls_accepted(url):
    assert is_safe_font_url(url)


@pytest.mark.parametrize("url", [
    "//evil.test/font.woff2",
    "/\\evil.test/font.woff2",
    "https://evil.test/font.woff2",
    "http://studio.test/fonts/brand.woff2",
    "javascript:alert(1)",
    "",
    None,
])
def test_font_urls_rejected(url):
    assert not is_safe_font_url(url)


def test_font_face_rule():
    rule = build_font_face("Brand Sans", "/fonts/brand.woff2", "woff2")

    assert rule.startswith("@font-face { font-family: 'Brand Sans'")
    assert 'url("/fonts/brand.woff2")' in rule
    assert build_font_face("Brand Sans", "https://evil.test/x.woff2") is None
    assert build_font_face("';", "/fonts/brand.woff2") is None


def test_colors_and_links():
    assert safe_css_color("#a62932") == "#A62932"
    assert safe_css_color("red; background: url(x)", "#000000") == "#000000"
    assert safe_link_url("javascript:alert(1)") is None
    assert safe_link_url("mailto:hello@studio.test") == "mailto:hello@studio.test"
    assert safe_image_url("data:image/png;base64,AAAA").startswith("data:image/png")
    assert safe_image_url("data:text/html;base64,AAAA") is None


def test_all_templates_are_registered():
    assert set(available_templates()) == {
        "editorial-luxury",
        "minimal-clean",
        "tech-modern",
        "organic-natural",
        "bold-playful",
        "social-media",
    }


def test_unknown_template_falls_back_to_default():
    assert get_renderer("vaporwave").template_id.value == "editorial-luxury"
    assert get_renderer(None).template_id.value == "editorial-luxury"

    html = render_brand_page(_page(template="vaporwave"))
    assert "template-editorial-luxury" in html


def test_text_is_escaped():
    html = render_brand_page(_page(brand_name="<script>alert(1)</script>"))

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_story_paragraphs_and_swatches():
    html = render_brand_page(_page())

    assert "<p>First paragraph.</p>" in html
    assert "<p>Second paragraph.</p>" in html
    assert "#112233" in html
    assert "17, 34, 51" in html


def test_disabled_section_is_omitted():
    html = render_brand_page(_page(sections=[SectionConfig(type=SectionType.STORY, enabled=False)]))

    assert 'id="story"' not in html
    assert 'id="hero"' in html


def test_section_order_follows_configuration():
    page = _page(sections=[
        SectionConfig(type=SectionType.FOOTER, order=0),
        SectionConfig(type=SectionType.HERO, order=1),
    ])

    html = render_brand_page(page)

    assert html.index('id="footer"') < html.index('id="hero"')


def test_social_strategy_only_in_social_media_template():
    strategy = {"social_strategy": {"goals": [{"title": "Grow reach", "description": "10k followers"}]}}

    social = render_brand_page(_page(template="social-media", extensions=strategy))
    editorial = render_brand_page(_page(template="editorial-luxury", extensions=strategy))
    social_without_strategy = render_brand_page(_page(template="social-media"))

    assert "Grow reach" in social
    assert 'id="social-strategy"' in social
    assert 'id="social-strategy"' not in editorial
    assert 'id="social-strategy"' not in social_without_strategy


def test_rejected_font_file_is_left_out_of_stylesheet():
    page = _page(fonts={
        "heading": {"name": "Display'; }", "file": "https://evil.test/x.woff2"},
        "body": {"name": "Body Sans", "file": "/fonts/body.woff2"},
    })

    html = render_brand_page(page)

    assert "evil.test" not in html
    assert "/fonts/body.woff2" in html
    assert "Display'; }" not in html


def test_unsafe_logo_urls_are_dropped():
    html = render_brand_page(_page(logos={"light": "javascript:alert(1)", "dark": "/logos/dark.svg"}))

    assert "javascript:" not in html
    assert "/logos/dark.svg" in html
