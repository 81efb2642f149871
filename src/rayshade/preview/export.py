"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from rayshade.preview.buffer import ImageBuffer
    >>> from rayshade.preview.export import save_png
    >>>
    >>> image = ImageBuffer(320, 240)
    >>> scene.render(image)
    >>> save_png(image, "output.png", gamma=2.2)
"""

from __future__ import annotations

import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from rayshade.preview.display import ImageLike, process_image_for_display


def image_to_uint8(
    image: ImageLike,
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for display/export.

    Args:
        image: Linear image of shape (H, W, 3) or an ImageBuffer.
        gamma: Gamma correction value (default 1.0, no correction).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(image, gamma=gamma)
    return (processed * 255).astype(np.uint8)


def save_png(
    image: ImageLike,
    filepath: str | os.PathLike[str],
    *,
    gamma: float = 1.0,
) -> None:
    """Save an image as an 8-bit PNG file.

    Args:
        image: Linear image of shape (H, W, 3) or an ImageBuffer.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (default 1.0, no correction).
    """
    image_uint8 = image_to_uint8(image, gamma=gamma)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)
