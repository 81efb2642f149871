"""Matplotlib-based preview display for rendered images.

Example:
    >>> from rayshade.preview.display import show_preview
    >>> show_preview(image_buffer, gamma=2.2)
"""

from __future__ import annotations

from typing import Union

import numpy as np
import numpy.typing as npt

from rayshade.preview.buffer import ImageBuffer

# Anything holding an image: a (H, W, 3) array or an ImageBuffer
ImageLike = Union[npt.NDArray[np.floating], ImageBuffer]


def as_image_array(image: ImageLike) -> npt.NDArray[np.float32]:
    """Get a float32 (H, W, 3) array from an image-like object.

    Raises:
        ValueError: If the array does not have shape (H, W, 3).
    """
    array = image.to_numpy() if isinstance(image, ImageBuffer) else np.asarray(image)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {array.shape}")
    return array.astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array of shape (H, W, 3) in [0, 1] range.
        gamma: Gamma value. 1.0 leaves the image unchanged.

    Returns:
        Gamma corrected image.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)

    # Apply gamma encoding: out = in^(1/gamma)
    result = np.power(image, 1.0 / gamma)

    return result.astype(np.float32)


def process_image_for_display(
    image: ImageLike,
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Gamma-correct an image and clamp it to [0, 1]."""
    result = apply_gamma(as_image_array(image), gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    image: ImageLike,
    *,
    gamma: float = 2.2,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib figure.

    Args:
        image: Linear image of shape (H, W, 3) or an ImageBuffer.
        gamma: Gamma correction value (default 2.2 for sRGB).
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(image, gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
