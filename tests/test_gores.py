"""Tests for the gore ("orange-peel") sphere projection."""

import math

import numpy as np
import pytest
from PIL import Image

from panocraft.errors import InvalidParameter
from panocraft.gores import GoreGeometry, GoreProjector, check_gore_count
from panocraft.pixelbuffer import EquirectangularSampler, PixelBuffer

from conftest import GRAY, WHITE


def make_projector(image, num_gores=12):
    return GoreProjector(EquirectangularSampler(PixelBuffer.from_image(image)), num_gores)


@pytest.mark.parametrize("num_gores", [1, 2, 12, 13, 100])
def test_height_is_half_the_pattern_width(num_gores):
    geom = GoreGeometry.for_page(3508, 2480, num_gores)
    assert geom.height == 1754
    assert geom.pattern_width == 3508
    assert geom.y_offset == 363
    assert geom.gore_width == pytest.approx(3508 / num_gores)


@pytest.mark.parametrize("bad", [0, -2, 2.5, float('nan'), float('inf'), True, "12", None])
def test_gore_count_rejected(bad):
    with pytest.raises(InvalidParameter):
        check_gore_count(bad)


def test_gore_count_accepted():
    assert check_gore_count(12) == 12
    assert check_gore_count(np.int64(7)) == 7
    assert check_gore_count(8.0) == 8


def test_projector_validates_gore_count(gray_source):
    with pytest.raises(InvalidParameter):
        make_projector(gray_source, 0)


def test_membership_rows_are_symmetric(gray_source):
    # 240 px wide, 12 gores → whole-pixel gores of 20 px, centre at 10
    proj = make_projector(gray_source, 12)
    geom = GoreGeometry.for_page(240, 200, 12)
    inside, _, _ = proj.membership(geom, 0, geom.height)
    offsets = np.arange(20) - 10

    for row in range(geom.height):
        for g in range(12):
            members = set(offsets[inside[row, g * 20:(g + 1) * 20]].tolist())
            assert members == {-d for d in members}, f"row {row} gore {g}"
        # every gore has the same silhouette
        assert np.array_equal(inside[row, :20], inside[row, 220:240])


def test_membership_follows_cosine_taper(gray_source):
    proj = make_projector(gray_source, 12)
    geom = GoreGeometry.for_page(240, 200, 12)
    inside, _, lat = proj.membership(geom, 0, geom.height)

    x_in = np.mod(np.arange(240, dtype=np.float64), geom.gore_width)[np.newaxis, :]
    expected = np.abs(x_in - geom.gore_width / 2) < np.cos(lat) * (geom.gore_width / 2)
    assert np.array_equal(inside, expected)

    widths = inside[:, :20].sum(axis=1)
    assert widths[0] <= 1                          # pole: (almost) nothing
    assert widths[geom.height // 2] == widths.max()  # equator: widest
    assert widths.max() == 19


def test_project_writes_exactly_the_gores(gray_source):
    proj = make_projector(gray_source, 12)
    page = PixelBuffer.allocate(240, 200)
    geom = proj.project(page)

    inside, _, _ = proj.membership(geom, 0, geom.height)
    expected = np.zeros((200, 240), dtype=bool)
    expected[geom.y_offset:geom.y_offset + geom.height] = inside

    painted = np.any(page.pixels != 255, axis=2)
    assert np.array_equal(painted, expected)
    assert np.all(page.pixels[expected] == GRAY)
    assert np.all(page.pixels[~expected] == WHITE)


def test_gores_run_west_to_east():
    # 12 × 6 source, one column per gore: R = column * 20
    pixels = np.zeros((6, 12, 4), dtype=np.uint8)
    pixels[..., 0] = (np.arange(12) * 20)[np.newaxis, :]
    pixels[..., 3] = 255
    proj = make_projector(Image.fromarray(pixels), 12)

    page = PixelBuffer.allocate(240, 200)
    geom = proj.project(page)
    equator = geom.y_offset + geom.height // 2
    for g in range(12):
        assert page.pixels[equator, g * 20 + 10, 0] == g * 20


@pytest.mark.parametrize("num_gores", [1, 100])
def test_extreme_gore_counts(gray_source, num_gores):
    proj = make_projector(gray_source, num_gores)
    page = PixelBuffer.allocate(600, 400)
    geom = proj.project(page)

    inside, _, _ = proj.membership(geom, 0, geom.height)
    band = page.pixels[geom.y_offset:geom.y_offset + geom.height]
    assert np.all(band[inside] == GRAY)
    assert np.all(band[~inside] == WHITE)
    assert inside.any()


def test_threaded_projection_matches_sequential(indexed_source):
    proj = make_projector(indexed_source, 12)
    seq = PixelBuffer.allocate(480, 300)
    par = PixelBuffer.allocate(480, 300)
    proj.project(seq, workers=1)
    proj.project(par, workers=4)
    assert np.array_equal(seq.pixels, par.pixels)


def test_page_too_short(gray_source):
    with pytest.raises(InvalidParameter):
        make_projector(gray_source).project(PixelBuffer.allocate(240, 100))


def test_longitudes_stay_in_range(gray_source):
    proj = make_projector(gray_source, 12)
    geom = GoreGeometry.for_page(3508, 2480, 12)
    inside, lon, lat = proj.membership(geom, 0, 64)
    assert np.all(np.abs(lon[inside]) < math.pi)
    assert np.all(lat >= -math.pi / 2)
