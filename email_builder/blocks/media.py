"""Image, Avatar and Button blocks."""

from __future__ import annotations

from typing import Literal, Optional

from email_builder.blocks.base import RenderContext, template
from email_builder.document.styles import (
    Color,
    ContentAlignment,
    FontFamily,
    FontWeight,
    Padding,
    SchemaModel,
    TextAlign,
    css,
    enum_value,
    get_font_family,
    get_padding,
)


class ImageStyle(SchemaModel):
    padding: Optional[Padding] = None
    background_color: Optional[Color] = None
    text_align: Optional[TextAlign] = None


class ImageSettings(SchemaModel):
    width: Optional[float] = None
    height: Optional[float] = None
    url: Optional[str] = None
    alt: Optional[str] = None
    link_href: Optional[str] = None
    content_alignment: Optional[ContentAlignment] = None


class ImageProps(SchemaModel):
    style: Optional[ImageStyle] = None
    props: Optional[ImageSettings] = None


_IMAGE = template(
    """
<div style="{{ section_style }}">
{%- set img %}<img alt="{{ alt }}" src="{{ src }}"{% if width is not none %} width="{{ width }}"{% endif %}{% if height is not none %} height="{{ height }}"{% endif %} style="{{ image_style }}">{% endset -%}
{%- if link_href %}<a href="{{ link_href }}" style="text-decoration: none" target="_blank">{{ img }}</a>{% else %}{{ img }}{% endif -%}
</div>
"""
)


def _dimension(value: Optional[float]):
    if value is None:
        return None
    return int(value) if float(value).is_integer() else value


def render_image(block_id: str, data: ImageProps, ctx: RenderContext) -> str:
    style = data.style or ImageStyle()
    settings = data.props or ImageSettings()
    width = _dimension(settings.width)
    height = _dimension(settings.height)
    return _IMAGE.render(
        section_style=css(
            {
                "padding": get_padding(style.padding),
                "backgroundColor": style.background_color,
                "textAlign": style.text_align,
            }
        ),
        image_style=css(
            {
                "width": width,
                "height": height,
                "outline": "none",
                "border": "none",
                "textDecoration": "none",
                "verticalAlign": enum_value(settings.content_alignment) or "middle",
                "display": "inline-block",
                "maxWidth": "100%",
            }
        ),
        alt=settings.alt or "",
        src=settings.url or "",
        width=width,
        height=height,
        link_href=settings.link_href,
    )


class AvatarStyle(SchemaModel):
    text_align: Optional[TextAlign] = None
    padding: Optional[Padding] = None


class AvatarSettings(SchemaModel):
    size: Optional[float] = None
    shape: Optional[Literal["circle", "square", "rounded"]] = None
    image_url: Optional[str] = None
    alt: Optional[str] = None


class AvatarProps(SchemaModel):
    style: Optional[AvatarStyle] = None
    props: Optional[AvatarSettings] = None


_AVATAR = template(
    '<div style="{{ style }}"><img alt="{{ alt }}" src="{{ src }}" height="{{ size }}" width="{{ size }}" style="{{ image_style }}"></div>'
)


def _avatar_radius(shape: str, size) -> Optional[float]:
    if shape == "circle":
        return size
    if shape == "rounded":
        return size * 0.125
    return None


def render_avatar(block_id: str, data: AvatarProps, ctx: RenderContext) -> str:
    style = data.style or AvatarStyle()
    settings = data.props or AvatarSettings()
    size = _dimension(settings.size if settings.size is not None else 64)
    shape = settings.shape or "square"
    return _AVATAR.render(
        style=css({"textAlign": style.text_align, "padding": get_padding(style.padding)}),
        alt=settings.alt or "",
        src=settings.image_url or "",
        size=size,
        image_style=css(
            {
                "outline": "none",
                "border": "none",
                "textDecoration": "none",
                "objectFit": "cover",
                "height": size,
                "width": size,
                "maxWidth": "100%",
                "display": "inline-block",
                "verticalAlign": "middle",
                "textAlign": "center",
                "borderRadius": _avatar_radius(shape, size),
            }
        ),
    )


class ButtonStyle(SchemaModel):
    background_color: Optional[Color] = None
    font_size: Optional[float] = None
    font_family: Optional[FontFamily] = None
    font_weight: Optional[FontWeight] = None
    text_align: Optional[TextAlign] = None
    padding: Optional[Padding] = None


class ButtonSettings(SchemaModel):
    button_background_color: Optional[Color] = None
    button_style: Optional[Literal["rectangle", "pill", "rounded"]] = None
    button_text_color: Optional[Color] = None
    full_width: Optional[bool] = None
    size: Optional[Literal["x-small", "small", "large", "medium"]] = None
    text: Optional[str] = None
    url: Optional[str] = None


class ButtonProps(SchemaModel):
    style: Optional[ButtonStyle] = None
    props: Optional[ButtonSettings] = None


# (vertical, horizontal) padding per size
BUTTON_SIZE_PADDING = {
    "x-small": (4, 8),
    "small": (8, 12),
    "medium": (12, 20),
    "large": (16, 32),
}

BUTTON_RADIUS = {"rectangle": None, "pill": 64, "rounded": 4}

_BUTTON = template(
    '<div style="{{ style }}"><a href="{{ url }}" style="{{ link_style }}" target="_blank"><span>{{ text }}</span></a></div>'
)


def render_button(block_id: str, data: ButtonProps, ctx: RenderContext) -> str:
    style = data.style or ButtonStyle()
    settings = data.props or ButtonSettings()
    vertical, horizontal = BUTTON_SIZE_PADDING[settings.size or "medium"]
    return _BUTTON.render(
        style=css(
            {
                "backgroundColor": style.background_color,
                "textAlign": style.text_align,
                "padding": get_padding(style.padding),
            }
        ),
        link_style=css(
            {
                "color": settings.button_text_color or "#FFFFFF",
                "fontSize": style.font_size if style.font_size is not None else 16,
                "fontFamily": get_font_family(style.font_family),
                "fontWeight": style.font_weight or FontWeight.BOLD,
                "backgroundColor": settings.button_background_color or "#999999",
                "borderRadius": BUTTON_RADIUS[settings.button_style or "rounded"],
                "display": "block" if settings.full_width else "inline-block",
                "padding": f"{vertical}px {horizontal}px",
                "textDecoration": "none",
            }
        ),
        url=settings.url or "",
        text=settings.text or "",
    )
