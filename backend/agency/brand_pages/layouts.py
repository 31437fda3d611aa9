"""
Jinja2 markup for brand pages and project content blocks.

All templates share one autoescaping environment; values placed inside
<style> are assembled by the renderers from sanitized parts and passed in
as Markup.
"""

from jinja2 import Environment, DictLoader, select_autoescape


DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{{ title }}</title>
    <style>
{{ stylesheet }}
    </style>
</head>
<body class="{{ body_class }}">
{% for section in sections %}
{{ section }}
{% endfor %}
</body>
</html>
"""

BASE_STYLESHEET = """
        {{ font_faces }}
        :root {
            --page-bg: {{ theme.background }};
            --page-text: {{ theme.text }};
            --page-accent: {{ theme.accent }};
            --heading-font: {{ heading_font }};
            --body-font: {{ body_font }};
        }
        body { margin: 0; background: var(--page-bg); color: var(--page-text); font-family: var(--body-font); line-height: 1.6; }
        h1, h2, h3, h4 { font-family: var(--heading-font); font-weight: {{ theme.heading_weight }}; }
        section { padding: 6rem 8vw; }
        .hero { min-height: 80vh; display: flex; flex-direction: column; justify-content: center; }
        .swatches, .mockups, .logos, .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: 2rem; }
        .swatch { border-radius: {{ theme.radius }}; padding: 2rem 1.5rem; }
        .accent { color: var(--page-accent); }
        img { max-width: 100%; }
"""

SECTION_TEMPLATES = {
    "sections/hero.html": """<section class="hero" id="hero">
    {% if page.hero.category_label %}<p class="accent">{{ page.hero.category_label }}</p>{% endif %}
    {% if assets.logos.light %}<img src="{{ assets.logos.light }}" alt="{{ page.brand_name }}" style="width: {{ page.hero.logo_size }}px">{% endif %}
    <h1>{{ page.brand_name }}</h1>
    {% if page.tagline %}<p class="tagline">{{ page.tagline }}</p>{% endif %}
    {% if page.hero.year or page.hero.copyright_text %}<p class="meta">{{ page.hero.year or "" }} {{ page.hero.copyright_text or "" }}</p>{% endif %}
</section>""",
    "sections/logo.html": """<section class="logo-showcase" id="logo">
    <h2>{{ page.text_overrides.logo_showcase_title or "Logo" }}</h2>
    {% if page.text_overrides.logo_showcase_subtitle %}<p>{{ page.text_overrides.logo_showcase_subtitle }}</p>{% endif %}
    <div class="logos">
    {% for variant, url in assets.logos.items() %}
        <figure><img src="{{ url }}" alt="{{ page.brand_name }} {{ variant }}"><figcaption>{{ variant|replace("_", " ") }}</figcaption></figure>
    {% endfor %}
    </div>
</section>""",
    "sections/colors.html": """<section class="colors" id="colors">
    <h2>{{ page.text_overrides.color_title or "Color Palette" }}</h2>
    {% if page.text_overrides.color_subtitle %}<p>{{ page.text_overrides.color_subtitle }}</p>{% endif %}
    <div class="swatches">
    {% for swatch in assets.colors %}
        <div class="swatch" style="background: {{ swatch.hex }}; color: {{ swatch.text }}">
            <h4>{{ swatch.name }}</h4>
            <p>{{ swatch.hex }}</p>
            <p>RGB {{ swatch.rgb }}</p>
        </div>
    {% endfor %}
    </div>
</section>""",
    "sections/typography.html": """<section class="typography" id="typography">
    <h2>{{ page.text_overrides.typography_title or "Typography" }}</h2>
    {% if page.text_overrides.typography_subtitle %}<p>{{ page.text_overrides.typography_subtitle }}</p>{% endif %}
    {% for role, font in assets.fonts %}
    <div class="specimen">
        <p class="accent">{{ role }}</p>
        <h3 style="font-family: {{ font.stack }}">{{ font.family }}</h3>
        <p style="font-family: {{ font.stack }}">Aa Bb Cc Dd Ee Ff Gg 0123456789</p>
        <p>{% for weight in font.weights %}{{ weight }}{% if not loop.last %} / {% endif %}{% endfor %}</p>
    </div>
    {% endfor %}
</section>""",
    "sections/story.html": """<section class="story" id="story">
    <h2>{{ page.text_overrides.story_title or "Our Story" }}</h2>
    {% if assets.story_image %}<img src="{{ assets.story_image }}" alt="">{% endif %}
    {% for paragraph in (page.story or "").split("\\n\\n") if paragraph.strip() %}
    <p>{{ paragraph }}</p>
    {% endfor %}
</section>""",
    "sections/mockups.html": """<section class="mockups-section" id="mockups">
    <h2>{{ page.text_overrides.mockups_title or "Brand in Use" }}</h2>
    {% if page.text_overrides.mockups_subtitle %}<p>{{ page.text_overrides.mockups_subtitle }}</p>{% endif %}
    <div class="mockups">
    {% for mockup in assets.mockups %}
        <figure data-category="{{ mockup.category }}"><img src="{{ mockup.url }}" alt="{{ mockup.label }}">{% if mockup.label %}<figcaption>{{ mockup.label }}</figcaption>{% endif %}</figure>
    {% endfor %}
    </div>
</section>""",
    "sections/social-strategy.html": """<section class="social-strategy" id="social-strategy">
    <h2>Social Media Strategy</h2>
    {% set strategy = page.extensions.social_strategy %}
    {% if strategy.goals %}<h3>Goals</h3><ul>{% for goal in strategy.goals %}<li><strong>{{ goal.title }}</strong> {{ goal.description }}</li>{% endfor %}</ul>{% endif %}
    {% if strategy.content_pillars %}<h3>Content Pillars</h3><div class="grid">{% for pillar in strategy.content_pillars %}<div><h4>{{ pillar.title }}</h4><p>{{ pillar.description }}</p></div>{% endfor %}</div>{% endif %}
    {% if strategy.platform_strategy %}<h3>Platforms</h3><table>{% for platform in strategy.platform_strategy %}<tr><td>{{ platform.platform }}</td><td>{{ platform.tone }}</td><td>{{ platform.frequency }}</td><td>{{ platform.content_types|join(", ") }}</td></tr>{% endfor %}</table>{% endif %}
    {% set tags = strategy.hashtags.branded + strategy.hashtags.industry + strategy.hashtags.campaign %}
    {% if tags %}<h3>Hashtags</h3><p>{% for tag in tags %}<span class="tag">#{{ tag|trim("#") }}</span> {% endfor %}</p>{% endif %}
    {% if strategy.calendar %}<h3>Weekly Calendar</h3><table>{% for entry in strategy.calendar %}<tr><td>{{ entry.day }}</td><td>{{ entry.platform }}</td><td>{{ entry.content_type }}</td><td>{{ entry.description }}</td><td>{{ entry.time or "" }}</td></tr>{% endfor %}</table>{% endif %}
    {% if strategy.kpis %}<h3>KPI Targets</h3><ul>{% for kpi in strategy.kpis %}<li>{{ kpi.metric }}: {{ kpi.target }}</li>{% endfor %}</ul>{% endif %}
    {% if strategy.audience %}<h3>Audience</h3>{% for persona in strategy.audience %}<div><h4>{{ persona.persona }}</h4><p>{{ persona.age }}</p><p>{{ persona.interests|join(", ") }}</p></div>{% endfor %}{% endif %}
    {% if strategy.brand_voice.tone %}<h3>Brand Voice</h3><p>{{ strategy.brand_voice.tone|join(", ") }}</p>
    <ul class="do">{% for item in strategy.brand_voice.do_list %}<li>{{ item }}</li>{% endfor %}</ul>
    <ul class="dont">{% for item in strategy.brand_voice.dont_list %}<li>{{ item }}</li>{% endfor %}</ul>{% endif %}
</section>""",
    "sections/footer.html": """<footer class="footer" id="footer">
    <h2>{{ page.text_overrides.footer_title or page.brand_name }}</h2>
    {% if page.text_overrides.footer_subtitle %}<p>{{ page.text_overrides.footer_subtitle }}</p>{% endif %}
    {% if page.text_overrides.footer_email %}<p><a href="mailto:{{ page.text_overrides.footer_email }}">{{ page.text_overrides.footer_email }}</a></p>{% endif %}
    <p class="meta">{{ page.text_overrides.footer_copyright or page.brand_name }}</p>
</footer>""",
}

BLOCK_TEMPLATES = {
    "blocks/hero.html": """<section class="block-hero">{% if image %}<img class="cover" src="{{ image }}" alt="">{% endif %}
    <h1>{{ c.title }}</h1>{% if c.subtitle %}<p>{{ c.subtitle }}</p>{% endif %}
</section>""",
    "blocks/text.html": """<section class="block-text">{% for paragraph in (c.text or "").split("\\n\\n") if paragraph.strip() %}<p>{{ paragraph }}</p>{% endfor %}</section>""",
    "blocks/image.html": """<figure class="block-image">{% if image %}<img src="{{ image }}" alt="{{ c.caption or "" }}">{% endif %}{% if c.caption %}<figcaption>{{ c.caption }}</figcaption>{% endif %}</figure>""",
    "blocks/gallery.html": """<section class="block-gallery grid" style="grid-template-columns: repeat({{ columns }}, 1fr)">{% for url in images %}<img src="{{ url }}" alt="">{% endfor %}</section>""",
    "blocks/quote.html": """<blockquote class="block-quote"><p>{{ c.quote }}</p>{% if c.author %}<cite>{{ c.author }}</cite>{% endif %}</blockquote>""",
    "blocks/split.html": """<section class="block-split image-{{ position }}">{% if image %}<img src="{{ image }}" alt="">{% endif %}<div>{{ c.split_text or "" }}</div></section>""",
    "blocks/stats.html": """<section class="block-stats grid">{% for stat in c.stats or [] %}<div><strong>{{ stat.value }}</strong><span>{{ stat.label }}</span></div>{% endfor %}</section>""",
    "blocks/video.html": """<section class="block-video">{% if link %}<a href="{{ link }}">{{ c.title or link }}</a>{% endif %}</section>""",
    "blocks/cta.html": """<section class="block-cta">{% if c.title %}<h2>{{ c.title }}</h2>{% endif %}{% if link %}<a class="button" href="{{ link }}">{{ c.button_text or "Get in touch" }}</a>{% endif %}</section>""",
    "blocks/spacer.html": """<div class="block-spacer" style="height: {{ height }}px"></div>""",
    "blocks/brand-cover.html": """<section class="block-brand-cover">{% if image %}<img src="{{ image }}" alt="{{ c.brand_name or "" }}">{% endif %}<h1>{{ c.brand_name }}</h1>{% if c.tagline %}<p>{{ c.tagline }}</p>{% endif %}{% if c.year %}<p class="meta">{{ c.year }}</p>{% endif %}</section>""",
    "blocks/section-header.html": """<header class="block-section-header">{% if c.section_number %}<span class="accent">{{ c.section_number }}</span>{% endif %}<h2>{{ c.section_title }}</h2>{% if c.section_description %}<p>{{ c.section_description }}</p>{% endif %}</header>""",
    "blocks/logo-showcase.html": """<section class="block-logo-showcase">{% if image %}<img src="{{ image }}" alt="Logo">{% endif %}{% if c.logo_description %}<p>{{ c.logo_description }}</p>{% endif %}</section>""",
    "blocks/logo-grid.html": """<section class="block-logo-grid grid">{% for variant in items %}<figure>{% if variant.image %}<img src="{{ variant.image }}" alt="{{ variant.name }}">{% endif %}<h4>{{ variant.name }}</h4>{% if variant.description %}<p>{{ variant.description }}</p>{% endif %}</figure>{% endfor %}</section>""",
    "blocks/logo-donts.html": """<section class="block-logo-donts"><h3>Incorrect Usage</h3><div class="grid">{% for dont in items %}<figure>{% if dont.image %}<img src="{{ dont.image }}" alt="{{ dont.label }}">{% endif %}<figcaption>{{ dont.label or "Don't do this" }}</figcaption></figure>{% endfor %}</div></section>""",
    "blocks/color-palette.html": """<section class="block-color-palette">{% for group, swatches in palettes %}{% if swatches %}<h3>{{ group }}</h3><div class="swatches">{% for swatch in swatches %}<div class="swatch" style="background: {{ swatch.hex }}; color: {{ swatch.text }}"><h4>{{ swatch.name }}</h4><p>{{ swatch.hex }}</p>{% if swatch.rgb %}<p>RGB {{ swatch.rgb }}</p>{% endif %}</div>{% endfor %}</div>{% endif %}{% endfor %}</section>""",
    "blocks/typography-showcase.html": """<section class="block-typography">{% for font in fonts %}<div><h3 style="font-family: {{ font.stack }}">{{ font.name }}</h3><p style="font-family: {{ font.stack }}">Aa Bb Cc 0123456789</p></div>{% endfor %}{% for weight in weights %}<p style="font-weight: {{ weight }}">{{ weight }}</p>{% endfor %}</section>""",
    "blocks/mockup-grid.html": """<section class="block-mockup-grid grid">{% for mockup in items %}<figure>{% if mockup.image %}<img src="{{ mockup.image }}" alt="{{ mockup.label or "" }}">{% endif %}{% if mockup.label %}<figcaption>{{ mockup.label }}</figcaption>{% endif %}</figure>{% endfor %}</section>""",
}

PROJECT_PAGE_STYLESHEET = """
        body { margin: 0; font-family: sans-serif; line-height: 1.6; }
        section, header, figure, blockquote { padding: 3rem 8vw; margin: 0; }
        .grid, .swatches { display: grid; grid-template-columns: repeat(auto-fill, minmax(200px, 1fr)); gap: 1.5rem; }
        .swatch { padding: 1.5rem; border-radius: 1rem; }
        img { max-width: 100%; }
"""


env = Environment(
    loader=DictLoader({
        "document.html": DOCUMENT_TEMPLATE,
        "stylesheet.css": BASE_STYLESHEET,
        **SECTION_TEMPLATES,
        **BLOCK_TEMPLATES,
    }),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=True),
)
