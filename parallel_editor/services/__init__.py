"""Services module initialization."""
from .settings import Settings
from .session import EditSession

__all__ = ["Settings", "EditSession"]
