"""TreeQLite utilities package."""

from .error_handler import handle_exceptions

__all__ = ["handle_exceptions"]
