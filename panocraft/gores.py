"""
gores.py — Equirectangular panorama → "orange-peel" gore pattern.

The pattern spans the full page width.  Laid side by side the gores form
the equator, so the pole-to-pole gore length (the pattern height) is half
the pattern width.  Each gore narrows towards the poles following

    half_width(lat) = cos(lat) · gore_width / 2

and the gore's own curved silhouette is the cut line, so no guide lines
are drawn.  Pixels outside every gore, or whose source coordinate falls
outside the panorama, keep the page background.
"""

import math
import numbers
from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameter
from .parallel import row_bands, run_parallel
from .pixelbuffer import HALF_PI, TWO_PI, EquirectangularSampler, PixelBuffer

BAND_ROWS = 128     # pattern rows per work unit


def check_gore_count(num_gores) -> int:
    """Return num_gores as an int, or raise InvalidParameter."""
    if isinstance(num_gores, bool) or not isinstance(num_gores, numbers.Real):
        raise InvalidParameter(f"gore count must be a number, got {num_gores!r}")
    if not math.isfinite(num_gores) or num_gores <= 0 or int(num_gores) != num_gores:
        raise InvalidParameter(f"gore count must be a positive integer, got {num_gores!r}")
    return int(num_gores)


@dataclass(frozen=True)
class GoreGeometry:
    """Pattern dimensions derived from the page size and gore count."""
    num_gores: int
    pattern_width: int
    height: int
    gore_width: float
    y_offset: int

    @classmethod
    def for_page(cls, page_width: int, page_height: int, num_gores: int) -> 'GoreGeometry':
        height = page_width // 2
        return cls(
            num_gores=num_gores,
            pattern_width=page_width,
            height=height,
            gore_width=page_width / num_gores,
            y_offset=(page_height - height) // 2,
        )


class GoreProjector:
    """Render the gore pattern of a panorama into a page buffer."""

    def __init__(self, sampler: EquirectangularSampler, num_gores: int = 12):
        self.sampler = sampler
        self.num_gores = check_gore_count(num_gores)

    def geometry(self, page: PixelBuffer) -> GoreGeometry:
        return GoreGeometry.for_page(page.width, page.height, self.num_gores)

    def membership(self, geom: GoreGeometry,
                   y0: int, y1: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Gore membership and sphere coordinates for pattern rows [y0, y1).

        Returns (inside, lon, lat), each shaped (y1 - y0, pattern_width).
        Outside the gores lon holds the gore's centre longitude, never NaN.
        """
        n = geom.num_gores
        gw = geom.gore_width

        xs = np.arange(geom.pattern_width, dtype=np.float64)[np.newaxis, :]
        ys = np.arange(y0, y1, dtype=np.float64)[:, np.newaxis]

        gore_index = np.floor(xs / gw)
        x_in_gore = np.mod(xs, gw)

        lat = (ys / geom.height) * math.pi - HALF_PI
        width_at_lat = np.cos(lat) * (gw / 2)

        offset = x_in_gore - gw / 2
        inside = np.abs(offset) < width_at_lat

        ratio = np.divide(offset, width_at_lat,
                          out=np.zeros(inside.shape, dtype=np.float64), where=inside)
        lon = (gore_index - (n / 2 - 0.5)) * (TWO_PI / n) + ratio * (math.pi / n)

        return inside, lon, np.broadcast_to(lat, inside.shape)

    def project(self, page: PixelBuffer, workers: int = 1) -> GoreGeometry:
        """Write every in-gore sample into *page*; returns the geometry used."""
        geom = self.geometry(page)
        if geom.height + geom.y_offset > page.height or geom.y_offset < 0:
            raise InvalidParameter(
                f"page {page.width} × {page.height} px is too short for a "
                f"{geom.pattern_width} × {geom.height} px gore pattern")

        def render_band(rows: tuple[int, int]) -> None:
            y0, y1 = rows
            inside, lon, lat = self.membership(geom, y0, y1)
            colors, valid = self.sampler.sample_clamped(lon, lat)
            page.write(y0 + geom.y_offset, 0, inside & valid, colors)

        run_parallel(render_band, row_bands(geom.height, BAND_ROWS), workers)
        return geom
