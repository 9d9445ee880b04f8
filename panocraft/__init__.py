"""
panocraft — Turn a 360° equirectangular panorama into a printable paper net.

    render_sphere_net(image, num_gores=12) → PNG bytes (orange-peel gores)
    render_cube_net(image)                 → PNG bytes (cube cross + guides)

Pages are 3508 × 2480 px (A4 landscape at 300 DPI) on a white background.
"""

from .compositor import (
    DEFAULT_GORES,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    SHAPES,
    PageCompositor,
    ProjectionRequest,
    compose_cube_net,
    compose_sphere_net,
    load_source,
    render,
    render_cube_net,
    render_sphere_net,
)
from .errors import (
    AllocationFailure,
    DecodeFailure,
    EncodeFailure,
    InvalidParameter,
    PanocraftError,
)

__version__ = "1.0.0"

__all__ = [
    'DEFAULT_GORES',
    'PAGE_HEIGHT',
    'PAGE_WIDTH',
    'SHAPES',
    'PageCompositor',
    'ProjectionRequest',
    'compose_cube_net',
    'compose_sphere_net',
    'load_source',
    'render',
    'render_cube_net',
    'render_sphere_net',
    'AllocationFailure',
    'DecodeFailure',
    'EncodeFailure',
    'InvalidParameter',
    'PanocraftError',
]
