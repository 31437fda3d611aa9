"""
Project page content block tests.
"""

from agency.brand_pages.blocks import render_block, render_blocks, render_project_page


def test_unknown_block_type_is_skipped():
    assert render_block({"id": "x", "type": "hologram", "content": {}}) is None


def test_blocks_render_in_order():
    rendered = render_blocks([
        {"id": "b", "type": "quote", "content": {"quote": "Later", "author": "Ada"}, "order": 5},
        {"id": "a", "type": "section-header", "content": {"section_title": "Sooner"}, "order": 1},
        {"id": "c", "type": "hologram", "content": {}, "order": 3},
    ])

    assert len(rendered) == 2
    assert "Sooner" in rendered[0]
    assert "<cite>Ada</cite>" in rendered[1]


def test_cta_rejects_script_links():
    html = render_block({
        "id": "cta",
        "type": "cta",
        "content": {"title": "Talk to us", "button_url": "javascript:alert(1)"},
    })

    assert "javascript:" not in html
    assert "Talk to us" in html


def test_gallery_and_spacer_bounds():
    gallery = render_block({
        "id": "g",
        "type": "gallery",
        "content": {"images": ["/a.jpg", "javascript:x", "https://cdn.test/b.jpg"], "columns": 99},
    })
    spacer = render_block({"id": "s", "type": "spacer", "content": {"height": "100px; color: red"}})

    assert gallery.count("<img") == 2
    assert "repeat(3, 1fr)" in gallery
    assert "height: 80px" in spacer


def test_color_palette_block():
    html = render_block({
        "id": "p",
        "type": "color-palette",
        "content": {
            "primary_colors": [{"name": "Ink", "hex": "#111111"}, {"name": "Bad", "hex": "red;"}],
            "secondary_colors": [],
        },
    })

    assert "Primary Colors" in html
    assert "Ink" in html
    assert "Bad" not in html
    assert "Secondary Colors" not in html


def test_typography_block_sanitizes_font_names():
    html = render_block({
        "id": "t",
        "type": "typography-showcase",
        "content": {"primary_font": {"name": "Brand'; }"}, "font_weights": [{"weight": 700}, "bold"]},
    })

    assert "&#39;Brand&#39;, sans-serif" in html
    assert "font-weight: 700" in html


def test_project_page_document():
    html = render_project_page("Northwind & Co", [{"id": "t", "type": "text", "content": {"text": "Hi"}}])

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Northwind &amp; Co</title>" in html
    assert "project-page" in html
