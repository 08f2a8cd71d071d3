"""
Settings management for the image editor.

Handles persistent storage of user preferences in settings.ini.
"""

from configparser import ConfigParser, Error as ConfigError
from pathlib import Path
from typing import Optional, Tuple, Union

from ..utils.logging import get_logger

logger = get_logger(__name__)


class Settings:
    """Manages application settings via settings.ini."""

    # Default settings file location (project root)
    SETTINGS_FILE = Path(__file__).parent.parent.parent / "settings.ini"

    # Section and keys
    SECTION = "preferences"
    KEY_MAX_WORKERS = "max_workers"
    KEY_ROWS_PER_CHUNK = "rows_per_chunk"
    KEY_JPEG_QUALITY = "jpeg_quality"
    KEY_PREVIEW_WIDTH = "preview_width"
    KEY_PREVIEW_HEIGHT = "preview_height"
    KEY_OPEN_DIR = "last_open_dir"
    KEY_SAVE_DIR = "last_save_dir"

    DEFAULTS = {
        KEY_MAX_WORKERS: "0",
        KEY_ROWS_PER_CHUNK: "64",
        KEY_JPEG_QUALITY: "95",
        KEY_PREVIEW_WIDTH: "800",
        KEY_PREVIEW_HEIGHT: "600",
        KEY_OPEN_DIR: "",
        KEY_SAVE_DIR: "",
    }

    def __init__(self, settings_file: Optional[Union[str, Path]] = None):
        """Initialize settings from file or create defaults."""
        self.settings_file = Path(settings_file) if settings_file else self.SETTINGS_FILE
        self.config = ConfigParser(interpolation=None)
        self._load()

    def _load(self) -> None:
        """Load settings from file or create defaults."""
        if self.settings_file.exists():
            try:
                self.config.read(self.settings_file)
            except ConfigError as e:
                logger.warning("Ignoring unreadable settings file %s: %s", self.settings_file, e)
                self.config = ConfigParser(interpolation=None)
        if not self.config.has_section(self.SECTION):
            self.config.add_section(self.SECTION)
        missing = [key for key in self.DEFAULTS if not self.config.has_option(self.SECTION, key)]
        for key in missing:
            self.config.set(self.SECTION, key, self.DEFAULTS[key])
        if missing:
            self._save()

    def _save(self) -> None:
        """Save settings to file."""
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, "w") as f:
                self.config.write(f)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self.settings_file, e)

    def _get(self, key: str) -> str:
        return self.config.get(self.SECTION, key, fallback=self.DEFAULTS[key])

    def _get_int(self, key: str, minimum: int, maximum: Optional[int] = None) -> int:
        try:
            value = int(self._get(key))
        except ValueError:
            logger.warning("Invalid %s in settings, using default", key)
            value = int(self.DEFAULTS[key])
        value = max(minimum, value)
        if maximum is not None:
            value = min(maximum, value)
        return value

    def _set(self, key: str, value) -> None:
        """Set and save a value."""
        self.config.set(self.SECTION, key, str(value))
        self._save()

    # ========== Processing ==========

    def get_max_workers(self) -> int:
        """Worker threads per filter pass (0 = pick automatically)."""
        return self._get_int(self.KEY_MAX_WORKERS, minimum=0)

    def set_max_workers(self, workers: int) -> None:
        self._set(self.KEY_MAX_WORKERS, max(0, int(workers)))

    def get_rows_per_chunk(self) -> int:
        """Rows a worker maps between cancellation checks."""
        return self._get_int(self.KEY_ROWS_PER_CHUNK, minimum=1)

    def set_rows_per_chunk(self, rows: int) -> None:
        self._set(self.KEY_ROWS_PER_CHUNK, max(1, int(rows)))

    # ========== Output ==========

    def get_jpeg_quality(self) -> int:
        """JPEG quality (1-100, default: 95)."""
        return self._get_int(self.KEY_JPEG_QUALITY, minimum=1, maximum=100)

    def set_jpeg_quality(self, quality: int) -> None:
        self._set(self.KEY_JPEG_QUALITY, min(100, max(1, int(quality))))

    def get_preview_box(self) -> Tuple[int, int]:
        """Display box used for preview scaling."""
        return (
            self._get_int(self.KEY_PREVIEW_WIDTH, minimum=1),
            self._get_int(self.KEY_PREVIEW_HEIGHT, minimum=1),
        )

    def set_preview_box(self, width: int, height: int) -> None:
        self.config.set(self.SECTION, self.KEY_PREVIEW_WIDTH, str(max(1, int(width))))
        self._set(self.KEY_PREVIEW_HEIGHT, max(1, int(height)))

    # ========== Directories ==========

    def get_open_dir(self) -> Optional[str]:
        """Get last directory an image was opened from."""
        return self._get(self.KEY_OPEN_DIR) or None

    def set_open_dir(self, path: str) -> None:
        self._set(self.KEY_OPEN_DIR, path)

    def get_save_dir(self) -> Optional[str]:
        """Get last directory an image was saved to."""
        return self._get(self.KEY_SAVE_DIR) or None

    def set_save_dir(self, path: str) -> None:
        self._set(self.KEY_SAVE_DIR, path)
