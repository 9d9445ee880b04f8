"""
pixelbuffer.py — RGBA pixel grids and equirectangular source sampling.

A PixelBuffer wraps an (H, W, 4) uint8 numpy array.  The decoded panorama
is held in one (read-only) and the printable page in another (written by
exactly one projector per request).

EquirectangularSampler turns (longitude, latitude) arrays into source
pixel colours with nearest-neighbour lookup:

    u  = (lon + π) / 2π          sx = floor(u · W)
    v  = (lat + π/2) / π         sy = floor(v · H)

Two edge policies are offered and both are needed:
    sample_clamped  — coordinates outside the grid yield no sample (gores)
    sample_wrapped  — coordinates wrap modulo W and H (cube faces)
"""

import math

import numpy as np
from PIL import Image

from .errors import AllocationFailure, InvalidParameter

TWO_PI = 2.0 * math.pi
HALF_PI = math.pi / 2.0

WHITE = (255, 255, 255, 255)


# ── Pixel buffer ──────────────────────────────────────────────────────────────

class PixelBuffer:
    """Rectangular RGBA sample grid backed by a numpy array."""

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
            raise ValueError(f"expected (H, W, 4) uint8 pixels, got {pixels.shape} {pixels.dtype}")
        self.pixels = pixels

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @classmethod
    def allocate(cls, width: int, height: int,
                 color: tuple[int, int, int, int] = WHITE) -> 'PixelBuffer':
        """Allocate a width × height buffer filled with *color*."""
        if width <= 0 or height <= 0:
            raise InvalidParameter(f"buffer size must be positive, got {width} × {height}")
        try:
            pixels = np.empty((height, width, 4), dtype=np.uint8)
        except MemoryError as exc:
            raise AllocationFailure(f"cannot allocate {width} × {height} RGBA buffer") from exc
        pixels[:, :] = color
        return cls(pixels)

    @classmethod
    def from_image(cls, image: Image.Image) -> 'PixelBuffer':
        """
        Copy a decoded PIL image into a read-only RGBA buffer.

        Raises InvalidParameter for an image with zero width or height.
        """
        w, h = image.size
        if w == 0 or h == 0:
            raise InvalidParameter(f"source image is empty ({w} × {h} px)")
        rgba = image if image.mode == 'RGBA' else image.convert('RGBA')
        try:
            pixels = np.array(rgba, dtype=np.uint8)
        except MemoryError as exc:
            raise AllocationFailure(f"cannot copy {w} × {h} source image") from exc
        pixels.flags.writeable = False
        return cls(pixels)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def fill(self, color: tuple[int, int, int, int]) -> None:
        self.pixels[:, :] = color

    def write(self, top: int, left: int, mask: np.ndarray, colors: np.ndarray) -> None:
        """
        Copy colors[mask] into the block whose top-left corner is (left, top).

        mask:   (h, w) bool array selecting the pixels to write
        colors: (h, w, 4) uint8 array of the same block shape
        """
        h, w = mask.shape
        block = self.pixels[top:top + h, left:left + w]
        block[mask] = colors[mask]

    def paste(self, top: int, left: int, colors: np.ndarray) -> None:
        """Overwrite the whole block at (left, top) with an (h, w, 4) colour array."""
        h, w = colors.shape[:2]
        self.pixels[top:top + h, left:left + w] = colors


# ── Equirectangular sampler ───────────────────────────────────────────────────

class EquirectangularSampler:
    """Nearest-neighbour lookup of (lon, lat) arrays in an equirectangular source."""

    def __init__(self, source: PixelBuffer):
        self.source = source

    def source_coords(self, lon: np.ndarray, lat: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Floored source column / row for each (lon, lat); may fall outside the grid."""
        u = (lon + math.pi) / TWO_PI
        v = (lat + HALF_PI) / math.pi
        sx = np.floor(u * self.source.width).astype(np.int64)
        sy = np.floor(v * self.source.height).astype(np.int64)
        return sx, sy

    def sample_clamped(self, lon: np.ndarray, lat: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Sample without wraparound.

        Returns (colors, valid): colors has a trailing RGBA axis, valid is
        False where the source coordinate lies outside the image and the
        corresponding colour must not be written.
        """
        W, H = self.source.width, self.source.height
        sx, sy = self.source_coords(lon, lat)
        valid = (sx >= 0) & (sx < W) & (sy >= 0) & (sy < H)
        colors = self._fetch(np.where(valid, sx, 0), np.where(valid, sy, 0))
        return colors, valid

    def sample_wrapped(self, lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
        """Sample with both axes wrapped modulo the source size; always yields a colour."""
        sx, sy = self.source_coords(lon, lat)
        return self._fetch(sx % self.source.width, sy % self.source.height)

    def _fetch(self, sx: np.ndarray, sy: np.ndarray) -> np.ndarray:
        # Fancy indexing copies, so the read-only source is never touched.
        colors = self.source.pixels[sy, sx]
        colors[..., 3] = 255
        return colors
