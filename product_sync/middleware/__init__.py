"""
Error middleware shared by the services.
"""

from .error_handler import ServiceErrorHandler, setup_error_handling

__all__ = ["ServiceErrorHandler", "setup_error_handling"]
