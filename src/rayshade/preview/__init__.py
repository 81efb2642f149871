"""Preview module for output and visualization.

Components:
    buffer: NumPy-backed image sink
    display: Matplotlib-based preview display and gamma correction
    export: PNG export via Pillow

Example:
    >>> from rayshade.preview import ImageBuffer, save_png, show_preview
    >>> image = ImageBuffer(320, 240)
    >>> scene.render(image)
    >>> save_png(image, "output.png", gamma=2.2)
    >>> show_preview(image)
"""

from rayshade.preview.buffer import ImageBuffer
from rayshade.preview.display import (
    ImageLike,
    apply_gamma,
    as_image_array,
    process_image_for_display,
    show_preview,
)
from rayshade.preview.export import image_to_uint8, save_png

__all__ = [
    # Image sink
    "ImageBuffer",
    # Display functions
    "show_preview",
    "apply_gamma",
    "as_image_array",
    "process_image_for_display",
    "ImageLike",
    # Export functions
    "save_png",
    "image_to_uint8",
]
