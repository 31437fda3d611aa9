"""
Sanitizers for user-supplied values that end up inside generated CSS or
URL attributes. Jinja2 autoescaping covers HTML text; these cover what
autoescaping cannot (style text and URL schemes).
"""

import re
from typing import Optional
from urllib.parse import urlsplit

from agency.core.config import settings

FONT_FAMILY_FORBIDDEN = re.compile(r"[\'\"\\{}();<>]")
HEX_COLOR = re.compile(r"#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})")
SAFE_LINK_SCHEMES = ("http", "https", "mailto")


def _origin(url: str) -> tuple:
    parts = urlsplit(url)
    return parts.scheme.lower(), parts.netloc.lower()


def sanitize_font_family(name: Optional[str]) -> str:
    """Strip quote, backslash, brace, parenthesis, semicolon and angle characters."""
    if not name:
        return ""
    cleaned = FONT_FAMILY_FORBIDDEN.sub("", name)
    return " ".join(cleaned.split())


def is_safe_font_url(url: Optional[str], public_origin: Optional[str] = None) -> bool:
    """
    Whether a font file URL may be embedded in an @font-face rule.

    Accepted: same-origin relative paths ("/fonts/a.woff2", not
    "//host/a.woff2"), absolute URLs on the public origin, data: and blob:.
    """
    if not url:
        return False
    url = url.strip()
    lowered = url.lower()
    if lowered.startswith("data:") or lowered.startswith("blob:"):
        return True
    if url.startswith("/"):
        return not url.startswith("//") and not url.startswith("/\\")
    origin = public_origin or settings.PUBLIC_ORIGIN
    if not origin:
        return False
    scheme, netloc = _origin(url)
    return scheme in ("http", "https") and (scheme, netloc) == _origin(origin)


def css_url(url: str) -> str:
    """Quote a vetted URL for use inside url("...")."""
    return (
        url.strip()
        .replace("\\", "%5C")
        .replace('"', "%22")
        .replace("<", "%3C")
        .replace(">", "%3E")
        .replace("\n", "")
        .replace("\r", "")
    )


def build_font_face(family: Optional[str], url: Optional[str], fmt: Optional[str] = None) -> Optional[str]:
    """
    Build an @font-face rule, or None when the family is empty or the URL is rejected.
    """
    family = sanitize_font_family(family)
    if not family or not is_safe_font_url(url):
        return None
    rule = f"@font-face {{ font-family: '{family}'; src: url(\"{css_url(url)}\")"
    if fmt and re.fullmatch(r"[a-z0-9-]+", fmt):
        rule += f" format('{fmt}')"
    return rule + "; font-display: swap; }"


def font_stack(family: Optional[str], fallback: str = "sans-serif") -> str:
    """CSS font-family value with a generic fallback."""
    family = sanitize_font_family(family)
    return f"'{family}', {fallback}" if family else fallback


def safe_css_color(value: Optional[str], default: Optional[str] = None) -> Optional[str]:
    """Hex colors pass through; anything else is replaced by the default."""
    if value and HEX_COLOR.fullmatch(value.strip()):
        return value.strip().upper()
    return default


def safe_link_url(url: Optional[str]) -> Optional[str]:
    """Allow http(s), mailto, relative and fragment links; reject other schemes."""
    if not url:
        return None
    url = url.strip()
    if url.startswith("#") or (url.startswith("/") and not url.startswith("//")):
        return url
    scheme = urlsplit(url).scheme.lower()
    return url if scheme in SAFE_LINK_SCHEMES else None


def safe_image_url(url: Optional[str]) -> Optional[str]:
    """Allow http(s), relative and data:image URLs."""
    if not url:
        return None
    url = url.strip()
    if url.lower().startswith("data:image/") or url.startswith("blob:"):
        return url
    if url.startswith("/") and not url.startswith("//"):
        return url
    scheme = urlsplit(url).scheme.lower()
    return url if scheme in ("http", "https") else None
