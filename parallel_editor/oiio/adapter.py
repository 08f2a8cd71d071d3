"""
OpenImageIO adapter for reading, writing and resampling pixel buffers.

Normalizes whatever the file holds (gray, RGB, RGBA) to 8-bit RGB and
converts OIIO failures into CodecError.
"""

import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

import numpy as np
import OpenImageIO as oiio

from ..core import CodecError, ImageFormat, PixelBuffer
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_JPEG_QUALITY = 95

PathLike = Union[str, Path]


class OiioAdapter:
    """Thin wrapper for robust OIIO bindings."""

    # OIIO writers may not be thread-safe
    _oiio_lock = threading.Lock()

    # ========== Files ==========

    @staticmethod
    def load(path: PathLike) -> PixelBuffer:
        """
        Read an image file into an RGB PixelBuffer.

        The format is taken from the file extension and must be one of
        jpg, jpeg, png or bmp.
        """
        path = Path(path)
        ImageFormat.from_hint(path.suffix)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")

        inp = oiio.ImageInput.open(str(path))
        if not inp:
            raise CodecError(f"Cannot open {path}: {oiio.geterror()}")
        try:
            spec = inp.spec()
            pixels = inp.read_image(oiio.UINT8)
            if pixels is None:
                raise CodecError(f"Cannot read {path}: {inp.geterror()}")
        finally:
            inp.close()

        rgb = OiioAdapter._to_rgb(np.asarray(pixels), spec.width, spec.height)
        logger.debug("Loaded %s (%dx%d, %d channel(s))", path, spec.width, spec.height, spec.nchannels)
        return PixelBuffer.from_array(rgb, copy=False)

    @staticmethod
    def save(
        buffer: PixelBuffer,
        path: PathLike,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ) -> Path:
        """Write ``buffer`` to ``path``; the extension selects the format."""
        path = Path(path)
        image_format = ImageFormat.from_hint(path.suffix)

        spec = oiio.ImageSpec(buffer.width, buffer.height, 3, oiio.UINT8)
        if image_format is ImageFormat.JPEG:
            spec.attribute("Compression", f"jpeg:{int(jpeg_quality)}")

        path_str = str(path)
        with OiioAdapter._oiio_lock:
            out = oiio.ImageOutput.create(path_str)
            if not out:
                raise CodecError(f"No writer for {path}: {oiio.geterror()}")
            try:
                if not out.open(path_str, spec):
                    raise CodecError(f"Cannot open {path} for writing: {out.geterror()}")
                if not out.write_image(np.ascontiguousarray(buffer.pixels)):
                    raise CodecError(f"Cannot write {path}: {out.geterror()}")
            finally:
                out.close()

        logger.debug("Saved %dx%d image to %s", buffer.width, buffer.height, path)
        return path

    # ========== In-memory codec ==========

    @staticmethod
    def decode(data: bytes, format_hint) -> PixelBuffer:
        """Decode raw file bytes of the given format into a PixelBuffer."""
        image_format = ImageFormat.from_hint(format_hint)
        if not data:
            raise CodecError("Cannot decode empty image data")
        with tempfile.TemporaryDirectory(prefix="parallel_editor_") as tmp:
            path = Path(tmp) / f"image{image_format.extension}"
            path.write_bytes(data)
            return OiioAdapter.load(path)

    @staticmethod
    def encode(
        buffer: PixelBuffer,
        format_hint,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ) -> bytes:
        """Encode ``buffer`` to raw file bytes of the given format."""
        image_format = ImageFormat.from_hint(format_hint)
        if buffer.size == 0:
            raise CodecError("Cannot encode an empty image")
        with tempfile.TemporaryDirectory(prefix="parallel_editor_") as tmp:
            path = Path(tmp) / f"image{image_format.extension}"
            OiioAdapter.save(buffer, path, jpeg_quality=jpeg_quality)
            return path.read_bytes()

    # ========== Resampling ==========

    @staticmethod
    def resample(
        buffer: PixelBuffer,
        width: int,
        height: int,
        filter_name: Optional[str] = None,
        interpolate: bool = True,
    ) -> PixelBuffer:
        """
        Resample ``buffer`` to width x height.

        With ``filter_name`` (e.g. "cubic", "lanczos3") the filtered
        ImageBufAlgo.resize is used; otherwise ImageBufAlgo.resample with
        bilinear (interpolate=True) or nearest-neighbour lookup.
        """
        src = oiio.ImageBuf(oiio.ImageSpec(buffer.width, buffer.height, 3, oiio.UINT8))
        src.set_pixels(oiio.ROI(0, buffer.width, 0, buffer.height, 0, 1, 0, 3), buffer.pixels)

        roi = oiio.ROI(0, width, 0, height, 0, 1, 0, 3)
        if filter_name:
            result = oiio.ImageBufAlgo.resize(src, filtername=filter_name, roi=roi)
        else:
            result = oiio.ImageBufAlgo.resample(src, interpolate=interpolate, roi=roi)

        error = result.geterror()
        if error:
            raise CodecError(f"Resampling to {width}x{height} failed: {error}")

        pixels = result.get_pixels(oiio.UINT8)
        return PixelBuffer.from_array(OiioAdapter._to_rgb(np.asarray(pixels), width, height), copy=False)

    # ========== Helpers ==========

    @staticmethod
    def _to_rgb(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
        """Reshape OIIO output to (height, width, 3) uint8."""
        if pixels.ndim == 2:
            pixels = pixels.reshape(height, width, -1)
        elif pixels.ndim == 4:
            # Volume images come back as (depth, height, width, channels)
            pixels = pixels[0]
        channels = pixels.shape[2]
        if channels == 1:
            pixels = np.repeat(pixels, 3, axis=2)
        elif channels == 2:
            # Gray + alpha
            pixels = np.repeat(pixels[:, :, :1], 3, axis=2)
        elif channels > 3:
            pixels = pixels[:, :, :3]
        return np.ascontiguousarray(pixels, dtype=np.uint8)

    @staticmethod
    def get_oiio_version() -> str:
        """Return OIIO version string."""
        return str(getattr(oiio, "__version__", "unknown"))
