# render/layout.py
"""
Circular layout: vertex i of N sits at angle i * 2π/N on a fixed circle
centred in the canvas. Order follows the input order, nothing else.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from gstore.document import Vertex

CANVAS_WIDTH = 400
CANVAS_HEIGHT = 400
RADIUS = 100


@dataclass
class PositionedVertex:
    name: str
    x: float
    y: float


def circle_angles(n: int) -> np.ndarray:
    if n <= 0:
        return np.zeros(0)
    return np.arange(n) * (2 * np.pi / n)


def circular_layout(
    vertices: Sequence[Vertex],
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    radius: float = RADIUS,
) -> List[PositionedVertex]:
    angles = circle_angles(len(vertices))
    if not len(angles):
        return []
    cx, cy = width / 2, height / 2
    xs = cx + radius * np.cos(angles)
    ys = cy + radius * np.sin(angles)
    return [
        PositionedVertex(name=v.name, x=float(x), y=float(y))
        for v, x, y in zip(vertices, xs, ys)
    ]
