"""
Brand page schemas.

A brand page is embedded in its project's brand_data payload. Template
specific documents (the social media strategy) live under `extensions` so
the core page model never depends on a particular template's shape.
"""

import re
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any
import enum

from agency.utils.colors import hex_to_rgb


class TemplateId(str, enum.Enum):
    """Closed set of brand page templates."""
    EDITORIAL_LUXURY = "editorial-luxury"
    MINIMAL_CLEAN = "minimal-clean"
    TECH_MODERN = "tech-modern"
    ORGANIC_NATURAL = "organic-natural"
    BOLD_PLAYFUL = "bold-playful"
    SOCIAL_MEDIA = "social-media"


DEFAULT_TEMPLATE = TemplateId.EDITORIAL_LUXURY


class SectionType(str, enum.Enum):
    """Independently toggleable page sections."""
    HERO = "hero"
    LOGO = "logo"
    COLORS = "colors"
    TYPOGRAPHY = "typography"
    STORY = "story"
    MOCKUPS = "mockups"
    FOOTER = "footer"
    SOCIAL_STRATEGY = "social-strategy"


class LogoVariants(BaseModel):
    light: Optional[str] = None
    dark: Optional[str] = None
    icon_light: Optional[str] = None
    icon_dark: Optional[str] = None
    grid: Optional[str] = None
    anatomy: Optional[str] = None


class BrandFont(BaseModel):
    name: str
    file: Optional[str] = None
    weights: List[int] = [400, 700]


class BrandFonts(BaseModel):
    heading: Optional[BrandFont] = None
    body: Optional[BrandFont] = None


class ColorSwatch(BaseModel):
    """Palette entry; rgb is derived from hex when not given."""
    name: str
    hex: str
    rgb: Optional[str] = None

    @field_validator("hex")
    @classmethod
    def normalize_hex(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("#"):
            value = f"#{value}"
        if not re.fullmatch(r"#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})", value):
            raise ValueError(f"Invalid hex color: {value}")
        return value.upper()

    @model_validator(mode="after")
    def derive_rgb(self):
        if not self.rgb:
            self.rgb = hex_to_rgb(self.hex)
        return self


class ColorPalette(BaseModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    colors: List[ColorSwatch] = []


class MockupImage(BaseModel):
    url: str
    category: str = "other"
    label: str = ""


class SectionConfig(BaseModel):
    type: SectionType
    enabled: bool = True
    order: int = 0


class TextOverrides(BaseModel):
    """Free-text replacements for section titles and subtitles."""
    logo_showcase_title: Optional[str] = None
    logo_showcase_subtitle: Optional[str] = None
    color_title: Optional[str] = None
    color_subtitle: Optional[str] = None
    typography_title: Optional[str] = None
    typography_subtitle: Optional[str] = None
    story_title: Optional[str] = None
    mockups_title: Optional[str] = None
    mockups_subtitle: Optional[str] = None
    footer_title: Optional[str] = None
    footer_subtitle: Optional[str] = None
    footer_email: Optional[str] = None
    footer_copyright: Optional[str] = None


class HeroConfig(BaseModel):
    category_label: Optional[str] = None
    copyright_text: Optional[str] = None
    year: Optional[str] = None
    logo_size: int = Field(300, ge=100, le=600)


class SocialGoal(BaseModel):
    title: str
    description: str = ""


class ContentPillar(BaseModel):
    title: str
    description: str = ""
    color: Optional[str] = None
    image: Optional[str] = None


class PlatformStrategy(BaseModel):
    platform: str
    tone: str = ""
    frequency: str = ""
    content_types: List[str] = []


class HashtagGroups(BaseModel):
    branded: List[str] = []
    industry: List[str] = []
    campaign: List[str] = []


class CalendarEntry(BaseModel):
    day: str
    platform: str
    content_type: str = ""
    description: str = ""
    time: Optional[str] = None


class KpiTarget(BaseModel):
    metric: str
    target: str


class AudiencePersona(BaseModel):
    persona: str
    age: str = ""
    interests: List[str] = []
    platforms: List[str] = []


class BrandVoice(BaseModel):
    tone: List[str] = []
    do_list: List[str] = []
    dont_list: List[str] = []


class SocialMediaStrategy(BaseModel):
    """Strategy document rendered by the social-media template."""
    goals: List[SocialGoal] = []
    content_pillars: List[ContentPillar] = []
    platform_strategy: List[PlatformStrategy] = []
    hashtags: HashtagGroups = HashtagGroups()
    calendar: List[CalendarEntry] = []
    kpis: List[KpiTarget] = []
    audience: List[AudiencePersona] = []
    brand_voice: BrandVoice = BrandVoice()


class BrandPageExtensions(BaseModel):
    """Open record for template-specific documents."""
    social_strategy: Optional[SocialMediaStrategy] = None

    class Config:
        extra = "allow"


class BrandPageStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class BrandPage(BaseModel):
    """Shareable branded microsite configuration."""
    id: str
    brand_name: str = Field(..., min_length=1)
    tagline: Optional[str] = None
    story: Optional[str] = None
    story_image: Optional[str] = None
    logos: LogoVariants = LogoVariants()
    fonts: BrandFonts = BrandFonts()
    colors: ColorPalette = ColorPalette()
    mockups: List[MockupImage] = []
    # Kept as a plain string: unknown ids fall back to the default template
    template: str = DEFAULT_TEMPLATE.value
    sections: List[SectionConfig] = []
    text_overrides: TextOverrides = TextOverrides()
    hero: HeroConfig = HeroConfig()
    extensions: BrandPageExtensions = BrandPageExtensions()
    status: BrandPageStatus = BrandPageStatus.DRAFT

    def is_section_enabled(self, section: SectionType) -> bool:
        """Sections without a config entry are enabled."""
        for config in self.sections:
            if config.type == section:
                return config.enabled
        return True

    @classmethod
    def from_brand_data(cls, brand_data: Optional[Dict[str, Any]]) -> Optional["BrandPage"]:
        """Extract the brand page stored in a project's brand_data payload."""
        if not brand_data:
            return None
        payload = brand_data.get("brand_page", brand_data)
        return cls.model_validate(payload)

    def to_brand_data(self) -> Dict[str, Any]:
        """Serialize into the shape stored in a project's brand_data payload."""
        return {"brand_page": self.model_dump(mode="json")}
