"""Helpers for turning the CHIP-8 display into something a renderer can show."""

import numpy as np
from typing import Tuple


def display_to_rgb(
    display,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean array of shape (64, 32) representing CHIP-8 display
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: white)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    if scale < 1:
        raise ValueError(f"scale must be positive, got {scale}")

    # (64 width, 32 height) -> (32 height, 64 width)
    pixels = np.array(display, dtype=np.bool_).T

    height, width = pixels.shape
    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def display_to_text(display, on: str = "#", off: str = ".") -> str:
    """Render the display as one line of text per screen row."""
    pixels = np.array(display, dtype=np.bool_).T
    return "\n".join("".join(on if p else off for p in row) for row in pixels)
