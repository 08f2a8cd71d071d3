"""OpenImageIO integration."""
from .adapter import OiioAdapter

__all__ = ["OiioAdapter"]
