"""
Color helpers for brand palettes.
"""


def expand_hex(hex_value: str) -> str:
    """Expand #RGB shorthand to #RRGGBB."""
    value = hex_value.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return f"#{value.upper()}"


def hex_to_rgb(hex_value: str) -> str:
    """
    Convert a hex color to the "r, g, b" string shown under palette swatches.

    Args:
        hex_value: Color in #RGB or #RRGGBB form

    Returns:
        Comma separated decimal channels, e.g. "166, 41, 50"
    """
    value = expand_hex(hex_value).lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {hex_value}")
    red, green, blue = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return f"{red}, {green}, {blue}"


def is_dark(hex_value: str) -> bool:
    """True when white text reads better than black on this color."""
    red, green, blue = (int(part) for part in hex_to_rgb(hex_value).split(", "))
    luminance = (0.299 * red + 0.587 * green + 0.114 * blue) / 255
    return luminance < 0.5
