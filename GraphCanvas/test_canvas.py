"""Pillow renderer: pixels, captions, PNG encoding."""
import io

from PIL import Image

from gstore.document import Edge, Vertex
from render.canvas import (
    BLUE,
    RED,
    WHITE,
    RenderOptions,
    _draw_text_on_baseline,
    default_captions,
    draw_graph,
    render_graph,
    resolve_edges,
)
from render.layout import circular_layout


def _two_vertices():
    return circular_layout([Vertex("A"), Vertex("B")])


def test_render_produces_400x400_png():
    data = render_graph(_two_vertices(), [Edge("A", "B")])
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    with Image.open(io.BytesIO(data)) as img:
        assert img.size == (400, 400)
        assert img.format == "PNG"


def test_two_vertices_joined_by_one_segment():
    img = draw_graph(_two_vertices(), [Edge("A", "B")])
    # A at angle 0, B at angle pi
    assert img.getpixel((300, 200)) == RED
    assert img.getpixel((100, 200)) == RED
    assert img.getpixel((200, 200)) == BLUE
    assert img.getpixel((150, 200)) == BLUE
    assert img.getpixel((200, 150)) == WHITE


def test_unresolved_edge_is_skipped():
    positioned = _two_vertices()
    img = draw_graph(positioned, [Edge("A", "Z"), Edge("Q", "B")])
    assert img.getpixel((200, 200)) == WHITE
    assert resolve_edges(positioned, [Edge("A", "Z")]) == []


def test_duplicate_names_resolve_to_first_vertex():
    positioned = circular_layout([Vertex("A"), Vertex("B"), Vertex("A")])
    segments = resolve_edges(positioned, [Edge("A", "B")])
    assert len(segments) == 1
    assert segments[0][0] is positioned[0]


def test_empty_graph_renders_blank_canvas():
    img = draw_graph([], [])
    assert img.getextrema() == ((255, 255), (255, 255), (255, 255), (255, 255))


def test_transparent_background():
    img = draw_graph(_two_vertices(), [], RenderOptions(transparent_background=True))
    assert img.getpixel((5, 5)) == (0, 0, 0, 0)
    assert img.getpixel((300, 200)) == RED


def test_vertex_name_is_drawn_to_the_right():
    img = draw_graph(_two_vertices(), [], RenderOptions(transparent_background=True))
    assert img.crop((308, 180, 345, 199)).getbbox() is not None
    assert img.crop((200, 0, 260, 120)).getbbox() is None


def test_axes_are_optional():
    plain = draw_graph([], [], RenderOptions(draw_axes=True))
    assert plain.getpixel((50, 200)) == (0, 0, 0, 255)
    assert plain.getpixel((200, 350)) == (0, 0, 0, 255)
    assert draw_graph([], []).getpixel((50, 200)) == WHITE


def test_captions_are_centered_in_the_top_band():
    opts = RenderOptions(transparent_background=True, captions=default_captions("Graph Akademik", "Kelompok 2"))
    img = draw_graph([], [], opts)
    bbox = img.crop((0, 0, 400, 55)).getbbox()
    assert bbox is not None
    left, _, right, _ = bbox
    assert abs((left + right) / 2 - 200) <= 8

    without = draw_graph([], [], RenderOptions(transparent_background=True))
    assert without.crop((0, 0, 400, 55)).getbbox() is None


class _BitmapFont:
    def getbbox(self, text):
        return (0, 2, 6 * len(text), 11)


class _RecordingDraw:
    def __init__(self):
        self.calls = []

    def text(self, xy, text, **kwargs):
        self.calls.append((xy, text, kwargs))


def test_bitmap_font_text_ends_on_the_baseline():
    draw, font = _RecordingDraw(), _BitmapFont()
    _draw_text_on_baseline(draw, (10, 50), "AB", font, RED)
    # the glyph box bottom (11) lands on y=50
    assert draw.calls == [((10, 39), "AB", {"fill": RED, "font": font})]
