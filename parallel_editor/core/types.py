"""
Core data types for the image editor.

All types use @dataclass and Enum for structured representations.
No loose tuples or dicts at the internal API boundary except Color.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np

from .errors import OutOfBoundsError, UnsupportedFormatError

# (r, g, b), each channel in [0, 255]
Color = Tuple[int, int, int]


class FlipAxis(Enum):
    """Axis to mirror a buffer across."""
    HORIZONTAL = "horizontal"  # left <-> right
    VERTICAL = "vertical"  # top <-> bottom

    @classmethod
    def parse(cls, value) -> "FlipAxis":
        """Accept a FlipAxis or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown flip axis: {value!r}") from None


class ResizeAlgorithm(Enum):
    """Resampling filter used when changing buffer dimensions."""
    NEAREST = auto()
    LINEAR = auto()
    CUBIC = auto()
    LANCZOS3 = auto()


class ImageFormat(Enum):
    """Raster formats the codec can read and write."""
    JPEG = "jpg"
    PNG = "png"
    BMP = "bmp"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def lossless(self) -> bool:
        return self is not ImageFormat.JPEG

    @classmethod
    def from_hint(cls, hint) -> "ImageFormat":
        """
        Resolve a format hint such as "png", ".JPEG" or "photo.bmp".

        Raises UnsupportedFormatError for anything unrecognized.
        """
        if isinstance(hint, cls):
            return hint
        text = str(hint or "").strip().lower()
        if "." in text:
            text = text.rsplit(".", 1)[1]
        text = _FORMAT_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            raise UnsupportedFormatError(str(hint)) from None


_FORMAT_ALIASES = {"jpeg": "jpg"}


def _check_channel(value) -> int:
    try:
        channel = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Channel value {value!r} must be an integer in [0, 255]") from None
    if channel != value or not 0 <= channel <= 255:
        raise ValueError(f"Channel value {value!r} must be an integer in [0, 255]")
    return channel


def as_color(color) -> Color:
    """Validate an (r, g, b) triple of integers in [0, 255]."""
    try:
        r, g, b = color
    except (TypeError, ValueError):
        raise ValueError(f"Color must be an (r, g, b) triple, got {color!r}") from None
    return _check_channel(r), _check_channel(g), _check_channel(b)


@dataclass(eq=False)
class PixelBuffer:
    """
    Fixed-size RGB raster.

    Pixels are stored row-major as a (height, width, 3) uint8 array, so
    pixel (x, y) lives at pixels[y, x].
    """
    width: int
    height: int
    pixels: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Buffer dimensions must be non-negative, got {self.width}x{self.height}"
            )
        if self.pixels is None:
            self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        elif self.pixels.shape != (self.height, self.width, 3) or self.pixels.dtype != np.uint8:
            raise ValueError(
                f"Pixel array {self.pixels.shape}/{self.pixels.dtype} does not match "
                f"a {self.width}x{self.height} RGB uint8 buffer"
            )

    @classmethod
    def create(cls, width: int, height: int) -> "PixelBuffer":
        """Allocate a zero-filled (black) buffer."""
        return cls(width=width, height=height)

    @classmethod
    def from_array(cls, array: np.ndarray, copy: bool = True) -> "PixelBuffer":
        """
        Wrap a (height, width, 3) integer array.

        Values must already lie in [0, 255]; the array is copied unless
        copy=False and it is already a contiguous uint8 array.
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected a (height, width, 3) array, got shape {array.shape}")
        if array.dtype != np.uint8:
            if not np.issubdtype(array.dtype, np.integer):
                raise ValueError(f"Expected integer pixel data, got {array.dtype}")
            if array.size and (array.min() < 0 or array.max() > 255):
                raise ValueError("Pixel values must lie in [0, 255]")
            array = array.astype(np.uint8)
        elif copy:
            array = array.copy()
        array = np.ascontiguousarray(array)
        height, width = array.shape[:2]
        return cls(width=width, height=height, pixels=array)

    @property
    def size(self) -> int:
        """Number of pixels."""
        return self.width * self.height

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.height, self.width, 3)

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(x, y, self.width, self.height)

    def get(self, x: int, y: int) -> Color:
        """Return the color at (x, y)."""
        self._check_bounds(x, y)
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def set(self, x: int, y: int, color: Color) -> None:
        """Overwrite the color at (x, y)."""
        self._check_bounds(x, y)
        self.pixels[y, x] = as_color(color)

    def clone(self) -> "PixelBuffer":
        """Deep copy."""
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def to_array(self) -> np.ndarray:
        """Return a copy of the pixel array."""
        return self.pixels.copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )

