"""Tests for display rendering helpers."""

import numpy as np
import pytest
from chip8core import display_to_rgb, create_color_scheme, DISPLAY_SIZE


def test_display_to_rgb_shape_and_colors():
    display = np.zeros(DISPLAY_SIZE, dtype=np.uint8)
    display[0] = 1
    display[64 + 3] = 1  # Row 1, column 3

    frame = display_to_rgb(display, scale=2, on_color=(1, 2, 3), off_color=(9, 9, 9))

    assert frame.shape == (64, 128, 3)
    assert frame.dtype == np.uint8
    assert frame[0:2, 0:2].tolist() == [[[1, 2, 3]] * 2] * 2
    assert frame[2, 6].tolist() == [1, 2, 3]
    assert frame[0, 2].tolist() == [9, 9, 9]


def test_display_to_rgb_unscaled():
    frame = display_to_rgb(np.ones(DISPLAY_SIZE, dtype=bool), scale=1)
    assert frame.shape == (32, 64, 3)
    assert (frame == (0, 255, 0)).all()


@pytest.mark.parametrize("display,scale", [
    (np.zeros(DISPLAY_SIZE), 0),
    (np.zeros(64 * 31), 1),
])
def test_display_to_rgb_rejects_bad_input(display, scale):
    with pytest.raises(ValueError):
        display_to_rgb(display, scale=scale)


def test_color_schemes():
    assert create_color_scheme("classic") == ((0, 255, 0), (0, 0, 0))
    on_color, off_color = create_color_scheme()
    assert len(on_color) == len(off_color) == 3

    with pytest.raises(ValueError, match="Unknown color scheme"):
        create_color_scheme("plaid")
