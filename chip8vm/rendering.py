"""CHIP-8 rendering utilities for emitted frames."""

import numpy as np
from typing import Tuple

from PIL import Image

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT


def display_to_rgb(
    frame: np.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert a CHIP-8 boolean frame to an RGB array with optional upscaling.

    Args:
        frame: Boolean array of shape (32, 64), row-major
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (32*scale, 64*scale, 3) with uint8 values
    """
    pixels = np.asarray(frame, dtype=np.bool_)
    if pixels.shape != (SCREEN_HEIGHT, SCREEN_WIDTH):
        raise ValueError(f"Expected frame shape ({SCREEN_HEIGHT}, {SCREEN_WIDTH}), got {pixels.shape}")

    rgb_frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Nearest neighbor upscaling
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
}


def create_color_scheme(name: str = "classic") -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Return the (lit, unlit) pixel colours of a named palette.

    Raises:
        ValueError: if ``name`` is not a key of ``COLOR_SCHEMES``.
    """
    try:
        return COLOR_SCHEMES[name]
    except KeyError:
        raise ValueError(f"Unknown color scheme '{name}'. Available: {list(COLOR_SCHEMES)}") from None


def display_to_text(frame: np.ndarray, on: str = "#", off: str = " ") -> str:
    """Render a frame as text, one line per row."""
    pixels = np.asarray(frame, dtype=np.bool_)
    return "\n".join("".join(on if lit else off for lit in row) for row in pixels)


def save_frame(
    frame: np.ndarray,
    filename: str,
    scale: int = 8,
    color_scheme: str = "classic",
) -> None:
    """Save a frame as an image file (format chosen from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    Image.fromarray(display_to_rgb(frame, scale, on_color, off_color)).save(filename)
