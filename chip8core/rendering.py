"""Host-side rendering of the CHIP-8 display buffer."""

import numpy as np
from typing import Tuple

from chip8core.constants import SCREEN_WIDTH, SCREEN_HEIGHT, DISPLAY_SIZE

Color = Tuple[int, int, int]

# name -> (on_color, off_color)
COLOR_SCHEMES = {
    "purple": ((179, 102, 184), (45, 25, 61)),
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def display_to_rgb(
    display,
    scale: int = 8,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Turn the flat display buffer into an upscaled RGB image.

    Args:
        display: 2048 cells in row-major order, as returned by Machine.read_display
        scale: Nearest-neighbour upscaling factor
        on_color: RGB color of lit cells
        off_color: RGB color of dark cells

    Returns:
        uint8 array of shape (32*scale, 64*scale, 3)
    """
    if scale < 1:
        raise ValueError(f"Scale must be a positive integer, got {scale}")

    cells = np.asarray(display).reshape(-1)
    if cells.size != DISPLAY_SIZE:
        raise ValueError(f"Expected {DISPLAY_SIZE} display cells, got {cells.size}")

    palette = np.array([off_color, on_color], dtype=np.uint8)
    image = palette[cells.astype(bool).astype(np.intp)].reshape(SCREEN_HEIGHT, SCREEN_WIDTH, 3)

    if scale > 1:
        image = image.repeat(scale, axis=0).repeat(scale, axis=1)
    return image


def create_color_scheme(scheme: str = "purple") -> Tuple[Color, Color]:
    """Return the (on_color, off_color) pair of a named scheme."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        )
    return COLOR_SCHEMES[scheme]
