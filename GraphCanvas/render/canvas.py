# render/canvas.py
"""
Raster renderer for circular graph layouts.

Draws, in order: background, optional axes, optional centred captions,
edges (blue segments between resolved endpoints), then vertices (red discs
with their name to the right). The result is encoded once as PNG; the same
bytes are written to storage and sent to the client.
"""
from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from gstore.document import Edge
from render.layout import CANVAS_HEIGHT, CANVAS_WIDTH, PositionedVertex

Color = Tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)
TRANSPARENT: Color = (0, 0, 0, 0)
BLACK: Color = (0, 0, 0, 255)
BLUE: Color = (0, 0, 255, 255)
RED: Color = (255, 0, 0, 255)


@dataclass
class Caption:
    text: str
    size: int
    baseline_y: float
    color: Color = BLACK


@dataclass
class RenderOptions:
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT
    transparent_background: bool = False
    draw_axes: bool = False
    captions: List[Caption] = field(default_factory=list)
    font_size: int = 15
    vertex_radius: int = 5
    label_offset: int = 10
    edge_color: Color = BLUE
    vertex_color: Color = RED


def default_captions(title: str, subtitle: str) -> List[Caption]:
    return [Caption(title, 20, 30), Caption(subtitle, 15, 50)]


_FONT_CACHE: Dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}


def get_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    cached = _FONT_CACHE.get(size)
    if cached is not None:
        return cached
    for font_name in ("Arial.ttf", "DejaVuSans.ttf", "LiberationSans-Regular.ttf"):
        try:
            font = ImageFont.truetype(font_name, size=size)
            _FONT_CACHE[size] = font
            return font
        except OSError:
            continue
    font = ImageFont.load_default(size=size)
    _FONT_CACHE[size] = font
    return font


def text_width(draw: ImageDraw.ImageDraw, text: str, font) -> float:
    return draw.textlength(text, font=font)


def _draw_text_on_baseline(draw: ImageDraw.ImageDraw, xy: Tuple[float, float], text: str, font, fill: Color) -> None:
    # Canvas-style fillText places y on the alphabetic baseline.
    if isinstance(font, ImageFont.FreeTypeFont):
        draw.text(xy, text, fill=fill, font=font, anchor="ls")
        return
    x, y = xy
    bottom = font.getbbox(text)[3]
    draw.text((x, y - bottom), text, fill=fill, font=font)


def centered_x(draw: ImageDraw.ImageDraw, width: int, text: str, font) -> float:
    return (width - text_width(draw, text, font)) / 2


def resolve_edges(
    positioned: Sequence[PositionedVertex], edges: Sequence[Edge]
) -> List[Tuple[PositionedVertex, PositionedVertex]]:
    """Pair each edge with its endpoints; edges naming unknown vertices are dropped."""
    by_name: Dict[str, PositionedVertex] = {}
    for pv in positioned:
        by_name.setdefault(pv.name, pv)
    segments = []
    for edge in edges:
        start = by_name.get(edge.source)
        end = by_name.get(edge.target)
        if start is not None and end is not None:
            segments.append((start, end))
    return segments


def draw_graph(
    positioned: Sequence[PositionedVertex],
    edges: Sequence[Edge],
    options: Optional[RenderOptions] = None,
) -> Image.Image:
    opts = options or RenderOptions()
    background = TRANSPARENT if opts.transparent_background else WHITE
    image = Image.new("RGBA", (opts.width, opts.height), background)
    draw = ImageDraw.Draw(image)

    if opts.draw_axes:
        draw.line([(50, 50), (50, 350), (350, 350)], fill=BLACK, width=1)

    for caption in opts.captions:
        font = get_font(caption.size)
        x = centered_x(draw, opts.width, caption.text, font)
        _draw_text_on_baseline(draw, (x, caption.baseline_y), caption.text, font, caption.color)

    for start, end in resolve_edges(positioned, edges):
        draw.line([(start.x, start.y), (end.x, end.y)], fill=opts.edge_color, width=1)

    font = get_font(opts.font_size)
    r = opts.vertex_radius
    for pv in positioned:
        draw.ellipse([pv.x - r, pv.y - r, pv.x + r, pv.y + r], fill=opts.vertex_color)
        _draw_text_on_baseline(draw, (pv.x + opts.label_offset, pv.y), pv.name, font, opts.vertex_color)

    return image


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def render_graph(
    positioned: Sequence[PositionedVertex],
    edges: Sequence[Edge],
    options: Optional[RenderOptions] = None,
) -> bytes:
    return encode_png(draw_graph(positioned, edges, options))
