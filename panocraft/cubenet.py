"""
cubenet.py — Equirectangular panorama → unfolded cube cross.

Each face pixel (i, j) is mapped to face coordinates

    u = 2i/S − 1,   v = 2j/S − 1          (both in [-1, 1))

then through the face's basis to a direction (x, y, z), and finally to

    lon = atan2(−x, z),   lat = asin(y / |(x, y, z)|)

The −x undoes the left-right mirroring between page space and the world
frame (+Z = front, +X = right, +Y = up).  Samples always wrap, so no face
pixel is left blank.

Canonical layout, wide horizontal cross on the landscape page:

            [ top  ]
    [ left ][front ][right ][ back ]
            [bottom]

With this layout every face edge shared in the cross is also a shared edge
of the physical cube, and the directions computed on both sides of it
coincide.
"""

import math
from dataclasses import dataclass, field

import numpy as np

from .errors import InvalidParameter
from .parallel import run_parallel
from .pixelbuffer import EquirectangularSampler, PixelBuffer

FACES = ('top', 'left', 'front', 'right', 'back', 'bottom')

# face → (u, v) → (x, y, z).  v points down the page, hence −v for "up".
FACE_BASES = {
    'front':  lambda u, v: (u, -v, np.ones_like(u)),            # +Z
    'back':   lambda u, v: (-u, -v, np.full_like(u, -1.0)),     # −Z, u flipped: continues from right
    'left':   lambda u, v: (np.full_like(u, -1.0), -v, u),      # −X
    'right':  lambda u, v: (np.ones_like(u), -v, -u),           # +X
    'top':    lambda u, v: (u, np.ones_like(u), v),             # +Y, bottom edge meets front
    'bottom': lambda u, v: (u, np.full_like(u, -1.0), -v),      # −Y, top edge meets front
}

# face → (column, row) in units of the face size
CROSS_CELLS = {
    'top':    (1, 0),
    'left':   (0, 1),
    'front':  (1, 1),
    'right':  (2, 1),
    'back':   (3, 1),
    'bottom': (1, 2),
}


# ── Layout ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CubeFaceLayout:
    """Face size and page position of every face of the cross."""
    face_size: int
    offset_x: int
    offset_y: int
    cells: dict[str, tuple[int, int]] = field(default_factory=lambda: dict(CROSS_CELLS))

    @classmethod
    def for_page(cls, page_width: int, page_height: int,
                 cells: dict[str, tuple[int, int]] = CROSS_CELLS) -> 'CubeFaceLayout':
        """Largest whole-pixel face size that fits the cross, centred on the page."""
        cols = max(c for c, _ in cells.values()) + 1
        rows = max(r for _, r in cells.values()) + 1
        size = math.floor(min(page_width / cols, page_height / rows))
        return cls(
            face_size=size,
            offset_x=(page_width - cols * size) // 2,
            offset_y=(page_height - rows * size) // 2,
            cells=dict(cells),
        )

    @property
    def faces(self) -> tuple[str, ...]:
        return tuple(f for f in FACES if f in self.cells)

    def origin(self, face: str) -> tuple[int, int]:
        """Page (x, y) of the face's top-left pixel."""
        col, row = self.cells[face]
        return self.offset_x + col * self.face_size, self.offset_y + row * self.face_size


# ── Projection ────────────────────────────────────────────────────────────────

def face_directions(face: str, size: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Direction vectors for every pixel of one face.

    Returns (x, y, z) arrays of shape (size, size), indexed [j, i]
    (row, column).  Vectors are not normalised.
    """
    try:
        basis = FACE_BASES[face]
    except KeyError:
        raise ValueError(f"Unknown face: {face!r}") from None

    coords = 2 * np.arange(size, dtype=np.float64) / size - 1
    u, v = np.meshgrid(coords, coords)   # u across columns, v down rows
    return basis(u, v)


def direction_to_lonlat(x: np.ndarray, y: np.ndarray,
                        z: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Longitude ∈ [-π, π] and latitude ∈ [-π/2, π/2] of each direction."""
    r = np.sqrt(x * x + y * y + z * z)
    lon = np.arctan2(-x, z)
    lat = np.arcsin(y / r)
    return lon, lat


class CubeNetProjector:
    """Render the six faces of the cube cross into a page buffer."""

    def __init__(self, sampler: EquirectangularSampler):
        self.sampler = sampler

    def layout(self, page: PixelBuffer) -> CubeFaceLayout:
        return CubeFaceLayout.for_page(page.width, page.height)

    def project(self, page: PixelBuffer, layout: CubeFaceLayout | None = None,
                workers: int = 1) -> CubeFaceLayout:
        """Write all face pixels into *page*; returns the layout used."""
        if layout is None:
            layout = self.layout(page)
        size = layout.face_size
        if size <= 0:
            raise InvalidParameter(f"page {page.width} × {page.height} px is too small for a cube net")

        def render_face(face: str) -> None:
            x, y, z = face_directions(face, size)
            lon, lat = direction_to_lonlat(x, y, z)
            del x, y, z
            left, top = layout.origin(face)
            page.paste(top, left, self.sampler.sample_wrapped(lon, lat))

        run_parallel(render_face, layout.faces, workers)
        return layout
