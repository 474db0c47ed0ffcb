"""Text-like blocks: Text, Heading, Html, Divider and Spacer."""

from __future__ import annotations

from typing import Literal, Optional

from markupsafe import Markup

from email_builder.blocks.base import RenderContext, render_markdown, template
from email_builder.document.styles import (
    Color,
    FontFamily,
    FontWeight,
    Padding,
    SchemaModel,
    TextAlign,
    css,
    get_font_family,
    get_padding,
)

_DIV = template('<div style="{{ style }}">{{ content }}</div>')


class TextStyle(SchemaModel):
    color: Optional[Color] = None
    background_color: Optional[Color] = None
    font_size: Optional[float] = None
    font_family: Optional[FontFamily] = None
    font_weight: Optional[FontWeight] = None
    text_align: Optional[TextAlign] = None
    padding: Optional[Padding] = None


class TextSettings(SchemaModel):
    text: Optional[str] = None
    markdown: Optional[bool] = None


class TextProps(SchemaModel):
    style: Optional[TextStyle] = None
    props: Optional[TextSettings] = None


def render_text(block_id: str, data: TextProps, ctx: RenderContext) -> str:
    style = data.style or TextStyle()
    settings = data.props or TextSettings()
    text = settings.text or ""
    return _DIV.render(
        style=css(
            {
                "color": style.color,
                "backgroundColor": style.background_color,
                "fontSize": style.font_size,
                "fontFamily": get_font_family(style.font_family),
                "fontWeight": style.font_weight,
                "textAlign": style.text_align,
                "padding": get_padding(style.padding),
            }
        ),
        content=render_markdown(text) if settings.markdown else text,
    )


class HeadingStyle(SchemaModel):
    color: Optional[Color] = None
    background_color: Optional[Color] = None
    font_family: Optional[FontFamily] = None
    font_weight: Optional[FontWeight] = None
    text_align: Optional[TextAlign] = None
    padding: Optional[Padding] = None


class HeadingSettings(SchemaModel):
    text: Optional[str] = None
    level: Optional[Literal["h1", "h2", "h3"]] = None


class HeadingProps(SchemaModel):
    style: Optional[HeadingStyle] = None
    props: Optional[HeadingSettings] = None


HEADING_FONT_SIZES = {"h1": 32, "h2": 24, "h3": 20}

_HEADING = template("<{{ level }} style=\"{{ style }}\">{{ text }}</{{ level }}>")


def render_heading(block_id: str, data: HeadingProps, ctx: RenderContext) -> str:
    style = data.style or HeadingStyle()
    settings = data.props or HeadingSettings()
    level = settings.level or "h2"
    return _HEADING.render(
        level=level,
        style=css(
            {
                "color": style.color,
                "backgroundColor": style.background_color,
                "fontWeight": style.font_weight or FontWeight.BOLD,
                "textAlign": style.text_align,
                "margin": 0,
                "fontFamily": get_font_family(style.font_family),
                "fontSize": HEADING_FONT_SIZES[level],
                "padding": get_padding(style.padding),
            }
        ),
        text=settings.text or "",
    )


class HtmlStyle(SchemaModel):
    color: Optional[Color] = None
    background_color: Optional[Color] = None
    font_family: Optional[FontFamily] = None
    font_size: Optional[float] = None
    text_align: Optional[TextAlign] = None
    padding: Optional[Padding] = None


class HtmlSettings(SchemaModel):
    contents: Optional[str] = None


class HtmlProps(SchemaModel):
    style: Optional[HtmlStyle] = None
    props: Optional[HtmlSettings] = None


def render_html(block_id: str, data: HtmlProps, ctx: RenderContext) -> str:
    style = data.style or HtmlStyle()
    contents = (data.props.contents if data.props else None) or ""
    return _DIV.render(
        style=css(
            {
                "color": style.color,
                "backgroundColor": style.background_color,
                "fontFamily": get_font_family(style.font_family),
                "fontSize": style.font_size,
                "textAlign": style.text_align,
                "padding": get_padding(style.padding),
            }
        ),
        # authored HTML is emitted verbatim
        content=Markup(contents),
    )


class DividerStyle(SchemaModel):
    background_color: Optional[Color] = None
    padding: Optional[Padding] = None


class DividerSettings(SchemaModel):
    line_color: Optional[Color] = None
    line_height: Optional[float] = None


class DividerProps(SchemaModel):
    style: Optional[DividerStyle] = None
    props: Optional[DividerSettings] = None


_DIVIDER = template('<div style="{{ style }}"><hr style="{{ line_style }}"></div>')


def render_divider(block_id: str, data: DividerProps, ctx: RenderContext) -> str:
    style = data.style or DividerStyle()
    settings = data.props or DividerSettings()
    line_height = settings.line_height if settings.line_height is not None else 1
    return _DIVIDER.render(
        style=css({"padding": get_padding(style.padding), "backgroundColor": style.background_color}),
        line_style=css(
            {
                "width": "100%",
                "border": "none",
                "borderTop": f"{line_height:g}px solid {settings.line_color or '#333333'}",
                "margin": 0,
            }
        ),
    )


class SpacerSettings(SchemaModel):
    height: Optional[float] = None


class SpacerProps(SchemaModel):
    props: Optional[SpacerSettings] = None


_SPACER = template('<div style="{{ style }}"></div>')


def render_spacer(block_id: str, data: SpacerProps, ctx: RenderContext) -> str:
    height = data.props.height if data.props and data.props.height is not None else 16
    return _SPACER.render(style=css({"height": height}))
