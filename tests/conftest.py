import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]

# Make the package importable when running from a source checkout
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from parallel_editor.core import PixelBuffer  # noqa: E402
from parallel_editor.services import Settings  # noqa: E402


@pytest.fixture
def primaries():
    """2x2 buffer: red, green / blue, white."""
    buffer = PixelBuffer.create(2, 2)
    buffer.set(0, 0, (255, 0, 0))
    buffer.set(1, 0, (0, 255, 0))
    buffer.set(0, 1, (0, 0, 255))
    buffer.set(1, 1, (255, 255, 255))
    return buffer


@pytest.fixture
def random_buffer():
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(97, 61, 3), dtype=np.uint8)
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def gradient_buffer():
    """Smooth 64x48 gradient, friendly to lossy codecs and resampling."""
    x = np.linspace(0, 255, 64, dtype=np.float64)
    y = np.linspace(0, 255, 48, dtype=np.float64)
    r = np.broadcast_to(x[np.newaxis, :], (48, 64))
    g = np.broadcast_to(y[:, np.newaxis], (48, 64))
    b = np.full((48, 64), 128.0)
    pixels = np.stack((r, g, b), axis=-1).astype(np.uint8)
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def settings(tmp_path):
    return Settings(tmp_path / "settings.ini")
