"""
compositor.py — Page lifecycle and the public rendering entry points.

One request = one page:

    allocate white A4 page (3508 × 2480 px, landscape, 300 DPI)
      → run exactly one projector (gores or cube cross) into it
      → cube only: overlay cut / fold lines
      → encode to PNG

The page is owned by the request and only returned once complete; any
failure surfaces as a PanocraftError and no partial image escapes.
"""

import io
import os
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .cubenet import CubeNetProjector
from .errors import DecodeFailure, EncodeFailure, InvalidParameter
from .gores import GoreProjector, check_gore_count
from .guides import GuideLineOverlay
from .pixelbuffer import WHITE, EquirectangularSampler, PixelBuffer

Image.MAX_IMAGE_PIXELS = None   # allow very large panoramas

# ── Constants ─────────────────────────────────────────────────────────────────

PAGE_WIDTH = 3508       # A4 landscape at 300 DPI
PAGE_HEIGHT = 2480
DEFAULT_GORES = 12
BACKGROUND = WHITE
SHAPES = ('sphere', 'cube')


# ── Request ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProjectionRequest:
    """A decoded source panorama plus the net to build from it."""
    source: Image.Image
    shape: str = 'sphere'
    num_gores: int = DEFAULT_GORES

    def validate(self) -> None:
        """Raise InvalidParameter before any pixel work if the request is unusable."""
        if self.shape not in SHAPES:
            raise InvalidParameter(f"unknown shape {self.shape!r}; expected one of {SHAPES}")
        if self.shape == 'sphere':
            check_gore_count(self.num_gores)
        w, h = self.source.size
        if w == 0 or h == 0:
            raise InvalidParameter(f"source image is empty ({w} × {h} px)")


def _check_workers(workers: int) -> None:
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise InvalidParameter(f"workers must be a positive integer, got {workers!r}")


# ── Compositor ────────────────────────────────────────────────────────────────

class PageCompositor:
    """Owns the output page of a single request."""

    def __init__(self, width: int = PAGE_WIDTH, height: int = PAGE_HEIGHT,
                 background: tuple[int, int, int, int] = BACKGROUND):
        self.width = width
        self.height = height
        self.background = background

    def allocate(self) -> PixelBuffer:
        return PixelBuffer.allocate(self.width, self.height, self.background)

    def compose(self, request: ProjectionRequest, workers: int = 1) -> PixelBuffer:
        """Validate, allocate and render; returns the finished page buffer."""
        request.validate()
        _check_workers(workers)

        sampler = EquirectangularSampler(PixelBuffer.from_image(request.source))
        page = self.allocate()

        if request.shape == 'sphere':
            GoreProjector(sampler, request.num_gores).project(page, workers=workers)
        else:
            layout = CubeNetProjector(sampler).project(page, workers=workers)
            GuideLineOverlay().draw(page, layout)
        return page

    @staticmethod
    def encode(page: PixelBuffer) -> bytes:
        """Serialise a finished page to PNG bytes."""
        out = io.BytesIO()
        try:
            page.to_image().save(out, format='PNG')
        except (OSError, ValueError) as exc:
            raise EncodeFailure(f"cannot encode {page.width} × {page.height} page as PNG: {exc}") from exc
        return out.getvalue()


# ── Entry points ──────────────────────────────────────────────────────────────

def render(request: ProjectionRequest, workers: int = 1) -> bytes:
    """Render *request* and return the page as PNG bytes."""
    compositor = PageCompositor()
    return compositor.encode(compositor.compose(request, workers=workers))


def compose_sphere_net(source: Image.Image, num_gores: int = DEFAULT_GORES,
                       workers: int = 1) -> Image.Image:
    """Gore pattern page as an RGBA PIL image."""
    page = PageCompositor().compose(ProjectionRequest(source, 'sphere', num_gores), workers)
    return page.to_image()


def compose_cube_net(source: Image.Image, workers: int = 1) -> Image.Image:
    """Cube cross page (with guide lines) as an RGBA PIL image."""
    page = PageCompositor().compose(ProjectionRequest(source, 'cube'), workers)
    return page.to_image()


def render_sphere_net(source: Image.Image, num_gores: int = DEFAULT_GORES,
                      workers: int = 1) -> bytes:
    return render(ProjectionRequest(source, 'sphere', num_gores), workers=workers)


def render_cube_net(source: Image.Image, workers: int = 1) -> bytes:
    return render(ProjectionRequest(source, 'cube'), workers=workers)


# ── Decoding ──────────────────────────────────────────────────────────────────

def load_source(data: str | os.PathLike | bytes) -> Image.Image:
    """
    Decode a panorama from a file path or raw bytes into an RGBA image.

    Raises:
        FileNotFoundError: path does not exist or is not a file
        DecodeFailure:     the data is not a readable image
    """
    if isinstance(data, (bytes, bytearray)):
        stream, label = io.BytesIO(data), f"<{len(data)} bytes>"
    else:
        if not os.path.isfile(data):
            raise FileNotFoundError(f"file not found: {data}")
        stream, label = data, os.fspath(data)

    try:
        with Image.open(stream) as img:
            return img.convert('RGBA')
    except UnidentifiedImageError as exc:
        raise DecodeFailure(f"not an image: {label}") from exc
    except (OSError, SyntaxError) as exc:
        # truncated or corrupt payloads surface here from the decoder
        raise DecodeFailure(f"cannot decode {label}: {exc}") from exc
