"""
Structural blocks: the email canvas and the two container types.

These are the only blocks with children. Child markup is produced through
``RenderContext.children`` so the editor can interleave insertion slots.
"""

from __future__ import annotations

from typing import List, Optional

from markupsafe import Markup
from pydantic import Field

from email_builder.blocks.base import RenderContext, template
from email_builder.document.styles import (
    Color,
    ContentAlignment,
    FontFamily,
    Padding,
    SchemaModel,
    css,
    enum_value,
    get_font_family,
    get_padding,
)

# EmailLayout


class EmailLayoutProps(SchemaModel):
    backdrop_color: Optional[Color] = None
    border_color: Optional[Color] = None
    border_radius: Optional[float] = None
    canvas_color: Optional[Color] = None
    text_color: Optional[Color] = None
    font_family: Optional[FontFamily] = None
    children_ids: Optional[List[str]] = None


_EMAIL_LAYOUT = template(
    """
<div style="{{ backdrop_style }}">
<table align="center" width="100%" style="{{ canvas_style }}" role="presentation" cellspacing="0" cellpadding="0" border="0"><tbody><tr style="width: 100%"><td>{{ children }}</td></tr></tbody></table>
</div>
"""
)


def render_email_layout(block_id: str, data: EmailLayoutProps, ctx: RenderContext) -> str:
    backdrop_style = css(
        {
            "backgroundColor": data.backdrop_color or "#F5F5F5",
            "color": data.text_color or "#262626",
            "fontFamily": get_font_family(data.font_family or FontFamily.MODERN_SANS),
            "fontSize": 16,
            "fontWeight": 400,
            "letterSpacing": "0.15008px",
            "lineHeight": "1.5",
            "margin": 0,
            "padding": "32px 0",
            "minHeight": "100%",
            "width": "100%",
        }
    )
    canvas_style = css(
        {
            "margin": "0 auto",
            "maxWidth": "600px",
            "backgroundColor": data.canvas_color or "#FFFFFF",
            "borderRadius": data.border_radius,
            "border": f"1px solid {data.border_color}" if data.border_color else None,
        }
    )
    return _EMAIL_LAYOUT.render(
        backdrop_style=backdrop_style,
        canvas_style=canvas_style,
        children=ctx.children(data.children_ids or [], parent_id=block_id),
    )


# Container


class ContainerStyle(SchemaModel):
    background_color: Optional[Color] = None
    border_color: Optional[Color] = None
    border_radius: Optional[float] = None
    padding: Optional[Padding] = None


class ContainerChildren(SchemaModel):
    children_ids: Optional[List[str]] = None


class ContainerProps(SchemaModel):
    style: Optional[ContainerStyle] = None
    props: Optional[ContainerChildren] = None


_CONTAINER = template('<div style="{{ style }}">{{ children }}</div>')


def render_container(block_id: str, data: ContainerProps, ctx: RenderContext) -> str:
    style = data.style or ContainerStyle()
    children_ids = (data.props.children_ids if data.props else None) or []
    return _CONTAINER.render(
        style=css(
            {
                "backgroundColor": style.background_color,
                "border": f"1px solid {style.border_color}" if style.border_color else None,
                "borderRadius": style.border_radius,
                "padding": get_padding(style.padding),
            }
        ),
        children=ctx.children(children_ids, parent_id=block_id),
    )


# ColumnsContainer


class ColumnsContainerStyle(SchemaModel):
    background_color: Optional[Color] = None
    padding: Optional[Padding] = None


class Column(SchemaModel):
    children_ids: List[str] = Field(default_factory=list)


class ColumnsContainerSettings(SchemaModel):
    fixed_widths: Optional[List[Optional[float]]] = Field(default=None, max_length=3)
    columns_count: Optional[int] = Field(default=None, ge=2, le=3)
    columns_gap: Optional[float] = None
    content_alignment: Optional[ContentAlignment] = None
    columns: Optional[List[Column]] = Field(default=None, max_length=3)


class ColumnsContainerProps(SchemaModel):
    style: Optional[ColumnsContainerStyle] = None
    props: Optional[ColumnsContainerSettings] = None


_COLUMNS = template(
    """
<div style="{{ style }}">
<table align="center" width="100%" cellpadding="0" border="0" style="table-layout: fixed; border-collapse: collapse"><tbody style="width: 100%"><tr style="width: 100%">
{% for cell in cells %}
<td style="{{ cell.style }}">{{ cell.children }}</td>
{% endfor %}
</tr></tbody></table>
</div>
"""
)


def column_padding(index: int, columns_count: int, gap: float) -> tuple:
    """``(padding_left, padding_right)`` that splits ``gap`` between cells."""
    if columns_count == 2:
        return (0, gap / 2) if index == 0 else (gap / 2, 0)
    return {
        0: (0, 2 * gap / 3),
        1: (gap / 3, gap / 3),
        2: (2 * gap / 3, 0),
    }[index]


def render_columns_container(block_id: str, data: ColumnsContainerProps, ctx: RenderContext) -> str:
    style = data.style or ColumnsContainerStyle()
    settings = data.props or ColumnsContainerSettings()
    columns_count = settings.columns_count or 2
    gap = settings.columns_gap or 0
    alignment = enum_value(settings.content_alignment) or "middle"
    widths = list(settings.fixed_widths or [])
    columns = list(settings.columns or [])

    cells = []
    for index in range(columns_count):
        padding_left, padding_right = column_padding(index, columns_count, gap)
        width = widths[index] if index < len(widths) else None
        children_ids = columns[index].children_ids if index < len(columns) else []
        cells.append(
            {
                "style": css(
                    {
                        "boxSizing": "content-box",
                        "verticalAlign": alignment,
                        "paddingLeft": padding_left,
                        "paddingRight": padding_right,
                        "width": width,
                    }
                ),
                "children": Markup(ctx.children(children_ids, parent_id=block_id, column_index=index)),
            }
        )

    return _COLUMNS.render(
        style=css({"backgroundColor": style.background_color, "padding": get_padding(style.padding)}),
        cells=cells,
    )
