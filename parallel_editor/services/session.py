"""
Edit session state.

Command-style facade over the engine for callers that want one object to
own the current image:
- Current image (replaced by each command, never mutated in place)
- Edit history and reverting
- Opening, saving and preview scaling
"""

from pathlib import Path
from typing import Optional, Union

from ..core import FlipAxis, HistoryStack, NullImageError, PixelBuffer, ResizeAlgorithm
from ..oiio import OiioAdapter
from ..processing import ParallelFilterExecutor, geometry, scale_to_fit
from ..utils.logging import get_logger
from .settings import Settings

logger = get_logger(__name__)


class EditSession:
    """Central state for one image being edited."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        executor: Optional[ParallelFilterExecutor] = None,
    ):
        self.settings = settings or Settings()
        self.executor = executor or ParallelFilterExecutor.from_settings(self.settings)
        self.history = HistoryStack()
        self._current: Optional[PixelBuffer] = None
        self.path: Optional[Path] = None

    # ========== Current Image ==========

    @property
    def current(self) -> Optional[PixelBuffer]:
        return self._current

    def has_image(self) -> bool:
        return self._current is not None

    def _require_image(self) -> PixelBuffer:
        if self._current is None:
            raise NullImageError()
        return self._current

    def _commit(self, buffer: PixelBuffer, record: bool) -> PixelBuffer:
        self._current = buffer
        if record:
            self.history.record(buffer)
        return buffer

    # ========== File Management ==========

    def open(self, path: Union[str, Path]) -> PixelBuffer:
        """Load an image, start a fresh history and record it."""
        path = Path(path)
        buffer = OiioAdapter.load(path)
        self.history.clear()
        self.path = path
        self.settings.set_open_dir(str(path.resolve().parent))
        logger.info("Opened %s (%dx%d)", path, buffer.width, buffer.height)
        return self._commit(buffer, record=True)

    def load_buffer(self, buffer: PixelBuffer, record: bool = True) -> PixelBuffer:
        """Start editing an in-memory buffer."""
        if buffer is None:
            raise NullImageError()
        self.history.clear()
        self.path = None
        return self._commit(buffer.clone(), record=record)

    def save(self, path: Union[str, Path]) -> Path:
        """Write the current image; the extension selects the format."""
        buffer = self._require_image()
        path = OiioAdapter.save(buffer, path, jpeg_quality=self.settings.get_jpeg_quality())
        self.settings.set_save_dir(str(path.resolve().parent))
        logger.info("Saved %s", path)
        return path

    # ========== Edit Commands ==========

    def apply_filter(self, filter_id: str, record: bool = True, **kwargs) -> PixelBuffer:
        """Apply one filter; extra keyword arguments go to the executor."""
        result = self.executor.apply(self._require_image(), filter_id, **kwargs)
        logger.info("Applied filter %s", filter_id)
        return self._commit(result, record)

    def flip(self, axis: Union[FlipAxis, str], record: bool = True) -> PixelBuffer:
        return self._commit(geometry.flip(self._require_image(), axis), record)

    def rotate90(self, record: bool = True) -> PixelBuffer:
        return self._commit(geometry.rotate_90(self._require_image()), record)

    def resize(
        self,
        width: int = geometry.DEFAULT_RESIZE_WIDTH,
        height: int = geometry.DEFAULT_RESIZE_HEIGHT,
        algorithm: ResizeAlgorithm = ResizeAlgorithm.LINEAR,
        record: bool = True,
    ) -> PixelBuffer:
        return self._commit(
            geometry.resize(self._require_image(), width, height, algorithm), record
        )

    # ========== History ==========

    def revert(self) -> Optional[PixelBuffer]:
        """
        Revert through the history stack.
        Returns the restored image, or None if nothing changed.
        """
        restored = self.history.revert()
        if restored is None:
            return None
        self._current = restored
        return self._current

    # ========== Presentation ==========

    def preview(self, box_width: Optional[int] = None, box_height: Optional[int] = None) -> PixelBuffer:
        """Display-scaled copy of the current image; not recorded."""
        default_width, default_height = self.settings.get_preview_box()
        return scale_to_fit(
            self._require_image(),
            box_width or default_width,
            box_height or default_height,
        )
