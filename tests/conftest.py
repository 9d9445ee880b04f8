import numpy as np
import pytest
from PIL import Image

GRAY = (128, 128, 128, 255)
WHITE = (255, 255, 255, 255)


@pytest.fixture
def solid_image():
    """Factory: a uniform RGBA image of the given colour and size."""
    def make(color=GRAY, size=(4, 2)):
        return Image.new('RGBA', size, color)
    return make


@pytest.fixture
def gray_source(solid_image):
    """The 4 × 2 flat-grey panorama."""
    return solid_image(GRAY, (4, 2))


@pytest.fixture
def indexed_source():
    """
    An 8 × 4 panorama where every pixel has a distinct colour:
    R = column * 10, G = row * 10, B = 200.
    """
    pixels = np.zeros((4, 8, 4), dtype=np.uint8)
    for row in range(4):
        for col in range(8):
            pixels[row, col] = (col * 10, row * 10, 200, 255)
    return Image.fromarray(pixels)
