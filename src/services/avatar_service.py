"""Default avatar generation.

Avatars are identicons: a 5x5 grid, mirrored around the vertical axis,
whose cells and colour are taken from the MD5 digest of a text seed.
The same seed always renders the same PNG bytes.
"""

import colorsys
import hashlib
import io

from PIL import Image, ImageDraw

GRID_CELLS = 5
PADDING_CELLS = 0.5
BACKGROUND = (240, 240, 240)


def _foreground(digest: bytes) -> tuple[int, int, int]:
    """Pick a saturated colour from the tail of the digest."""
    hue = int.from_bytes(digest[-2:], "big") / 0xFFFF
    lightness = 0.45 + (digest[-3] / 255) * 0.15
    r, g, b = colorsys.hls_to_rgb(hue, lightness, 0.55)
    return int(r * 255), int(g * 255), int(b * 255)


def _cells(digest: bytes) -> list[list[bool]]:
    """Derive the mirrored on/off grid from the head of the digest."""
    half = (GRID_CELLS + 1) // 2
    grid = [[False] * GRID_CELLS for _ in range(GRID_CELLS)]
    for index in range(GRID_CELLS * half):
        row, col = divmod(index, half)
        filled = digest[index % len(digest)] % 2 == 0
        grid[row][col] = filled
        grid[row][GRID_CELLS - 1 - col] = filled
    return grid


def generate_identicon(seed: str, size: int = 200) -> bytes:
    """Render a deterministic identicon PNG for a seed.

    Args:
        seed: Text the image is derived from (the username).
        size: Edge length of the square image in pixels.

    Returns:
        bytes: PNG-encoded image.

    Raises:
        ValueError: If ``size`` is too small to draw the grid.
    """
    if size < 2 * (GRID_CELLS + 2 * PADDING_CELLS):
        raise ValueError(f"Avatar size {size} is too small")

    digest = hashlib.md5(seed.encode("utf-8")).digest()
    grid = _cells(digest)
    colour = _foreground(digest)

    cell = size / (GRID_CELLS + 2 * PADDING_CELLS)
    offset = cell * PADDING_CELLS

    image = Image.new("RGB", (size, size), color=BACKGROUND)
    draw = ImageDraw.Draw(image)
    for row, cols in enumerate(grid):
        for col, filled in enumerate(cols):
            if not filled:
                continue
            x0 = offset + col * cell
            y0 = offset + row * cell
            draw.rectangle(
                [round(x0), round(y0), round(x0 + cell) - 1, round(y0 + cell) - 1],
                fill=colour,
            )

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class AvatarGenerator:
    """Renders default avatars at a fixed size."""

    content_type = "image/png"

    def __init__(self, size: int = 200) -> None:
        self.size = size

    def render(self, seed: str) -> bytes:
        return generate_identicon(seed, self.size)
