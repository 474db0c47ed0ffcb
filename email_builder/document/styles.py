"""Shared style primitives used by block schemas and renderers."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

# "#RRGGBB"
Color = Annotated[str, Field(pattern=r"^#[0-9a-fA-F]{6}$")]


class SchemaModel(BaseModel):
    """Base for block payloads: camelCase on the wire, unknown keys dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Padding(SchemaModel):
    top: float
    bottom: float
    right: float
    left: float


class FontFamily(str, Enum):
    MODERN_SANS = "MODERN_SANS"
    BOOK_SANS = "BOOK_SANS"
    ORGANIC_SANS = "ORGANIC_SANS"
    GEOMETRIC_SANS = "GEOMETRIC_SANS"
    HEAVY_SANS = "HEAVY_SANS"
    ROUNDED_SANS = "ROUNDED_SANS"
    MODERN_SERIF = "MODERN_SERIF"
    BOOK_SERIF = "BOOK_SERIF"
    MONOSPACE = "MONOSPACE"


FONT_STACKS: Dict[str, str] = {
    "MODERN_SANS": '"Helvetica Neue", "Arial Nova", "Nimbus Sans", Arial, sans-serif',
    "BOOK_SANS": 'Optima, Candara, "Noto Sans", source-sans-pro, sans-serif',
    "ORGANIC_SANS": 'Seravek, "Gill Sans Nova", Ubuntu, Calibri, "DejaVu Sans", source-sans-pro, sans-serif',
    "GEOMETRIC_SANS": 'Avenir, "Avenir Next LT Pro", Montserrat, Corbel, "URW Gothic", source-sans-pro, sans-serif',
    "HEAVY_SANS": 'Bahnschrift, "DIN Alternate", "Franklin Gothic Medium", "Nimbus Sans Narrow", sans-serif-condensed, sans-serif',
    "ROUNDED_SANS": 'ui-rounded, "Hiragino Maru Gothic ProN", Quicksand, Comfortaa, Manjari, "Arial Rounded MT Bold", Calibri, source-sans-pro, sans-serif',
    "MODERN_SERIF": 'Charter, "Bitstream Charter", "Sitka Text", Cambria, serif',
    "BOOK_SERIF": '"Iowan Old Style", "Palatino Linotype", "URW Palladio L", P052, serif',
    "MONOSPACE": '"Nimbus Mono PS", "Courier New", "Cutive Mono", monospace',
}


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class FontWeight(str, Enum):
    BOLD = "bold"
    NORMAL = "normal"


class ContentAlignment(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


def get_padding(padding: Optional[Padding]) -> Optional[str]:
    if padding is None:
        return None
    return f"{_px(padding.top)} {_px(padding.right)} {_px(padding.bottom)} {_px(padding.left)}"


def get_font_family(font_family: Optional[Any]) -> Optional[str]:
    if font_family is None:
        return None
    key = font_family.value if isinstance(font_family, Enum) else str(font_family)
    return FONT_STACKS.get(key)


def enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


# CSS properties that React leaves unitless
_UNITLESS = {"fontWeight", "lineHeight", "opacity", "zIndex", "flex", "flexGrow", "flexShrink", "order"}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _px(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}px"


def css(styles: Dict[str, Any]) -> str:
    """
    Serialize a camelCase style mapping to an inline ``style`` attribute value.

    ``None`` values are dropped and bare numbers get a ``px`` suffix, except
    for unitless properties and zero.
    """
    parts = []
    for name, value in styles.items():
        if value is None:
            continue
        value = enum_value(value)
        if isinstance(value, bool):
            value = str(value).lower()
        elif isinstance(value, (int, float)):
            if name in _UNITLESS or value == 0:
                value = int(value) if float(value).is_integer() else value
            else:
                value = _px(value)
        prop = _CAMEL_RE.sub("-", name).lower()
        parts.append(f"{prop}: {value}")
    return "; ".join(parts)
