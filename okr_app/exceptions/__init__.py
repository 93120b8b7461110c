from .base import AppException, ValidationError, InvalidMeasurableError, NotFoundError
from .handlers import app_exception_handler, general_exception_handler

__all__ = [
    "AppException",
    "ValidationError",
    "InvalidMeasurableError",
    "NotFoundError",
    "app_exception_handler",
    "general_exception_handler"
]
