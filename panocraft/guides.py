"""
guides.py — Cut and fold lines for the cube cross.

Both line sets are derived from the same cell table that places the faces,
so they always agree with the rendered net:

    an edge used by one face   → part of the outer silhouette (cut, solid)
    an edge used by two faces  → fold line (dashed), one per shared edge

Each set is drawn on its own transparent layer and alpha-composited onto
the page, matching a translucent canvas stroke.
"""

import math
from collections import Counter, defaultdict

import numpy as np
from PIL import Image, ImageDraw

from .cubenet import CubeFaceLayout
from .pixelbuffer import PixelBuffer

CUT_COLOR = (0, 0, 0, 102)          # black at 40 % opacity
FOLD_COLOR = (50, 50, 50, 128)      # dark grey at 50 % opacity
LINE_WIDTH = 2
FOLD_DASH = (15, 5)                 # px on, px off

Point = tuple[int, int]
Edge = tuple[Point, Point]


# ── Edge geometry (grid units) ────────────────────────────────────────────────

def cell_edges(col: int, row: int) -> list[Edge]:
    """The four edges of one grid cell, endpoints in sorted order."""
    return [
        ((col, row), (col + 1, row)),             # top
        ((col + 1, row), (col + 1, row + 1)),     # right
        ((col, row + 1), (col + 1, row + 1)),     # bottom
        ((col, row), (col, row + 1)),             # left
    ]


def cross_edges(cells: dict[str, tuple[int, int]]) -> tuple[list[Edge], list[Edge]]:
    """Split all face edges into (cut_edges, fold_edges)."""
    counts = Counter(edge for col, row in cells.values() for edge in cell_edges(col, row))
    cut = sorted(edge for edge, n in counts.items() if n == 1)
    fold = sorted(edge for edge, n in counts.items() if n == 2)
    return cut, fold


def outline(cut_edges: list[Edge]) -> list[Point]:
    """
    Walk the cut edges into one closed loop of corner points.

    Vertices lying on a straight run are dropped, so the cross yields its
    twelve corners.  Raises ValueError if the edges do not form a single
    simple loop.
    """
    neighbours: dict[Point, list[Point]] = defaultdict(list)
    for a, b in cut_edges:
        neighbours[a].append(b)
        neighbours[b].append(a)
    if not neighbours or any(len(n) != 2 for n in neighbours.values()):
        raise ValueError("cut edges do not form a simple loop")

    start = min(neighbours)
    loop = [start]
    prev, cur = None, start
    while True:
        a, b = neighbours[cur]
        nxt = b if a == prev else a
        if nxt == start:
            break
        loop.append(nxt)
        prev, cur = cur, nxt

    if len(loop) != len(neighbours):
        raise ValueError("cut edges form more than one loop")

    corners = []
    for i, p in enumerate(loop):
        q0 = loop[i - 1]
        q1 = loop[(i + 1) % len(loop)]
        cross = (p[0] - q0[0]) * (q1[1] - p[1]) - (p[1] - q0[1]) * (q1[0] - p[0])
        if cross != 0:
            corners.append(p)
    return corners


# ── Drawing ───────────────────────────────────────────────────────────────────

def dashed_line(draw: ImageDraw.ImageDraw, p1, p2, dash_len: float, gap_len: float,
                fill, width: int) -> None:
    """Stroke p1 → p2 as dashes, starting with a full dash at p1."""
    (x1, y1), (x2, y2) = p1, p2
    dx, dy = x2 - x1, y2 - y1
    length = math.hypot(dx, dy)
    if length <= 0:
        return
    ux, uy = dx / length, dy / length
    dist = 0.0
    while dist < length:
        seg = min(dash_len, length - dist)
        draw.line([(x1 + ux * dist, y1 + uy * dist),
                   (x1 + ux * (dist + seg), y1 + uy * (dist + seg))],
                  fill=fill, width=width)
        dist += dash_len + gap_len


class GuideLineOverlay:
    """Draws the solid cut silhouette and dashed fold lines of a cube cross."""

    def __init__(self, cut_color=CUT_COLOR, fold_color=FOLD_COLOR,
                 width: int = LINE_WIDTH, dash: tuple[int, int] = FOLD_DASH):
        self.cut_color = cut_color
        self.fold_color = fold_color
        self.width = width
        self.dash = dash

    def draw(self, page: PixelBuffer, layout: CubeFaceLayout) -> None:
        cut, fold = cross_edges(layout.cells)
        size = layout.face_size

        def to_page(p: Point) -> tuple[int, int]:
            return layout.offset_x + p[0] * size, layout.offset_y + p[1] * size

        image = page.to_image()

        cut_layer = Image.new('RGBA', image.size, (0, 0, 0, 0))
        corners = [to_page(p) for p in outline(cut)]
        ImageDraw.Draw(cut_layer).line(corners + [corners[0]], fill=self.cut_color,
                                       width=self.width, joint='curve')
        image = Image.alpha_composite(image, cut_layer)
        del cut_layer

        fold_layer = Image.new('RGBA', image.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(fold_layer)
        for a, b in fold:
            dashed_line(draw, to_page(a), to_page(b), self.dash[0], self.dash[1],
                        self.fold_color, self.width)
        image = Image.alpha_composite(image, fold_layer)
        del fold_layer

        page.pixels[:, :] = np.asarray(image)
