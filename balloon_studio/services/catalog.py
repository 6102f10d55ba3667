"""Color metadata and balloon pricing."""

from pydantic import BaseModel, Field

from balloon_studio.config import Settings, get_settings
from balloon_studio.errors import ValidationError
from balloon_studio.models.inventory import BalloonColor, BalloonSize


class ColorInfo(BaseModel):
    """Display metadata for a stocked color."""

    color: BalloonColor
    name: str
    hex: str


COLOR_TABLE: dict[BalloonColor, ColorInfo] = {
    info.color: info
    for info in (
        ColorInfo(color=BalloonColor.RED, name="Red", hex="#FF5252"),
        ColorInfo(color=BalloonColor.BLUE, name="Blue", hex="#2196F3"),
        ColorInfo(color=BalloonColor.GREEN, name="Green", hex="#4CAF50"),
        ColorInfo(color=BalloonColor.YELLOW, name="Yellow", hex="#FFEB3B"),
        ColorInfo(color=BalloonColor.PURPLE, name="Purple", hex="#9C27B0"),
        ColorInfo(color=BalloonColor.PINK, name="Pink", hex="#E91E63"),
        ColorInfo(color=BalloonColor.ORANGE, name="Orange", hex="#FF9800"),
        ColorInfo(color=BalloonColor.WHITE, name="White", hex="#FFFFFF"),
        ColorInfo(color=BalloonColor.BLACK, name="Black", hex="#000000"),
        ColorInfo(color=BalloonColor.SILVER, name="Silver", hex="#C0C0C0"),
        ColorInfo(color=BalloonColor.GOLD, name="Gold", hex="#FFD700"),
    )
}

_BY_HEX = {info.hex.lower(): info.color for info in COLOR_TABLE.values()}


def resolve_color(value: str) -> str:
    """
    Normalise a color reference from the canvas.

    Accepts a color name in any case or one of the palette hex values and
    returns the canonical lower-case name. Unknown values come back stripped
    and lower-cased so they can still be reported as unavailable.
    """
    cleaned = value.strip().lower()
    if cleaned in _BY_HEX:
        return _BY_HEX[cleaned].value
    return cleaned


def parse_color(value: str) -> BalloonColor:
    """Resolve a color and require it to be one the studio stocks."""
    try:
        return BalloonColor(resolve_color(value))
    except ValueError:
        raise ValidationError(
            f"Invalid color '{value}'",
            errors=[{"field": "color", "allowed": [c.value for c in BalloonColor]}],
        ) from None


def parse_size(value: str) -> BalloonSize:
    """Accept '11inch'/'16inch' or 'small'/'large'."""
    try:
        return BalloonSize(value)
    except ValueError:
        pass
    try:
        return BalloonSize.for_category(value)
    except ValueError:
        raise ValidationError(
            f"Invalid size '{value}'",
            errors=[{"field": "size", "allowed": [s.value for s in BalloonSize]}],
        ) from None


class PriceTable(BaseModel):
    """Unit prices in integer cents, by size only."""

    small_cents: int = Field(ge=0)
    large_cents: int = Field(ge=0)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PriceTable":
        settings = settings or get_settings()
        return cls(
            small_cents=settings.price_small_cents,
            large_cents=settings.price_large_cents,
        )

    def unit_price(self, size: BalloonSize) -> int:
        return self.small_cents if size is BalloonSize.SMALL else self.large_cents


def format_cents(cents: int) -> str:
    """Render integer cents as dollars, e.g. 199 -> '$1.99'."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars}.{remainder:02d}"
