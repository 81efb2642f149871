"""In-memory image sink backed by a NumPy array.

Example:
    >>> from rayshade.preview.buffer import ImageBuffer
    >>> image = ImageBuffer(4, 3)
    >>> image.set_pixel(0, 0, (1.0, 0.5, 0.0))
    >>> image.to_numpy().shape
    (3, 4, 3)
"""

import numpy as np
import numpy.typing as npt


class ImageBuffer:
    """A float RGB image that records how often each pixel was written.

    Pixel (0, 0) is the top-left corner. The pixel array has shape
    (height, width, 3).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Create a black image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If a dimension is not a positive integer.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._pixels = np.zeros((self._height, self._width, 3), dtype=np.float32)
        self._write_counts = np.zeros((self._height, self._width), dtype=np.int32)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def write_counts(self) -> npt.NDArray[np.int32]:
        """Number of set_pixel calls per pixel, shape (height, width)."""
        return self._write_counts.copy()

    def set_pixel(self, x: int, y: int, color: tuple[float, float, float]) -> None:
        """Store the color of one pixel.

        Raises:
            IndexError: If (x, y) lies outside the image.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self._width}x{self._height} image")
        self._pixels[y, x] = color
        self._write_counts[y, x] += 1

    def get_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Read back the color of one pixel."""
        r, g, b = self._pixels[y, x]
        return (float(r), float(g), float(b))

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Copy of the pixels, shape (height, width, 3)."""
        return self._pixels.copy()

    def __repr__(self) -> str:
        return f"ImageBuffer(width={self._width}, height={self._height})"
