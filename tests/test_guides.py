"""Tests for cut / fold guide geometry and drawing."""

import numpy as np
import pytest

from panocraft.cubenet import CROSS_CELLS, CubeFaceLayout
from panocraft.guides import GuideLineOverlay, cross_edges, outline
from panocraft.pixelbuffer import PixelBuffer


def test_cross_edge_split():
    cut, fold = cross_edges(CROSS_CELLS)
    assert len(cut) == 14       # 6 faces × 4 edges − 2 × 5 shared
    assert set(fold) == {
        ((1, 1), (2, 1)),       # top | front
        ((1, 2), (2, 2)),       # front | bottom
        ((1, 1), (1, 2)),       # left | front
        ((2, 1), (2, 2)),       # front | right
        ((3, 1), (3, 2)),       # right | back
    }
    assert not set(cut) & set(fold)


def test_cross_outline_corners():
    cut, _ = cross_edges(CROSS_CELLS)
    corners = outline(cut)
    assert len(corners) == 12
    assert set(corners) == {
        (1, 0), (2, 0), (2, 1), (4, 1), (4, 2), (2, 2),
        (2, 3), (1, 3), (1, 2), (0, 2), (0, 1), (1, 1),
    }
    # consecutive corners are joined by axis-aligned runs
    for p, q in zip(corners, corners[1:] + corners[:1]):
        assert p[0] == q[0] or p[1] == q[1]


def test_outline_rejects_disjoint_pieces():
    cut, _ = cross_edges({'a': (0, 0), 'b': (5, 5)})
    with pytest.raises(ValueError):
        outline(cut)


def _darkened(region):
    return np.any(region[..., :3] < 250, axis=-1)


def test_draws_solid_cut_and_dashed_fold_lines():
    page = PixelBuffer.allocate(440, 340)
    layout = CubeFaceLayout(face_size=100, offset_x=20, offset_y=20)
    GuideLineOverlay().draw(page, layout)

    # top edge of the top face: part of the silhouette, solid
    top_edge = page.pixels[17:24, 125:216]
    assert np.all(_darkened(top_edge).any(axis=0))

    # front | right boundary at x = 20 + 2·100: dashed
    fold = page.pixels[125:216, 216:225]
    rows = _darkened(fold).any(axis=1)
    assert rows.any() and not rows.all()

    # face interiors and the page outside the net are untouched
    assert page.pixels[170, 170].tolist() == [255, 255, 255, 255]
    assert page.pixels[330, 430].tolist() == [255, 255, 255, 255]
    # no line between the top face and the empty cell beside it
    assert page.pixels[70, 300].tolist() == [255, 255, 255, 255]


def test_lines_are_translucent():
    page = PixelBuffer.allocate(440, 340, (0, 200, 0, 255))
    layout = CubeFaceLayout(face_size=100, offset_x=20, offset_y=20)
    GuideLineOverlay().draw(page, layout)

    darkest = page.pixels[17:24, 125:216, 1].min()
    assert 0 < darkest < 200        # green shows through the cut line
    assert np.all(page.pixels[..., 3] == 255)
