"""CHIP-8 rendering utilities for visualization."""

from typing import Tuple, Union

import numpy as np

from vipchip.constants import SCREEN_HEIGHT, SCREEN_WIDTH


def chip8_display_to_rgb(
    display,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 boolean display to RGB array with optional upscaling.

    Args:
        display: Boolean display, either the (32, 64) grid or the 2048
            row-major cells published by the scheduler
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: white)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    pixels = np.asarray(display, dtype=np.bool_).reshape(SCREEN_HEIGHT, SCREEN_WIDTH)

    rgb_frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


COLOR_SCHEMES = {
    "classic": ((255, 255, 255), (0, 0, 0)),  # White on black
    "green": ((0, 255, 0), (0, 0, 0)),  # Green on black
    "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
    "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
    "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
}


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name, one of ``COLOR_SCHEMES``

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )

    return COLOR_SCHEMES[scheme]


def parse_color(value: Union[int, str], alpha: bool = False) -> Tuple[int, int, int]:
    """Parse a ``0xRRGGBB`` or ``0xRRGGBBAA`` color into an RGB tuple.

    Strings are read as hexadecimal with or without the ``0x``/``#`` prefix,
    and eight digits mean a trailing alpha byte. An integer has no digit
    count to go by, so ``alpha`` says whether its lowest byte is alpha:
    ``parse_color(0x000000FF, alpha=True)`` is opaque black. The alpha byte
    is dropped.
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("#"):
            text = text[1:]
        elif text.startswith("0x"):
            text = text[2:]
        if len(text) not in (6, 8):
            raise ValueError(f"Expected 6 or 8 hex digits, got '{value}'")
        try:
            number = int(text, 16)
        except ValueError:
            raise ValueError(f"Invalid hex color '{value}'") from None
        alpha = len(text) == 8
    else:
        number = int(value)
        limit = 0xFFFFFFFF if alpha else 0xFFFFFF
        if not 0 <= number <= limit:
            raise ValueError(f"Color out of range: {value}")

    if alpha:
        number >>= 8
    return (number >> 16) & 0xFF, (number >> 8) & 0xFF, number & 0xFF
