"""Reusable type definitions shared across the package."""

from .base import CheckedModel, StrictBaseModel
from .exceptions import (
    ConfigurationError,
    IpniError,
    SigningError,
    ValidationError,
)

__all__ = [
    "StrictBaseModel",
    "CheckedModel",
    # Exceptions
    "IpniError",
    "ValidationError",
    "ConfigurationError",
    "SigningError",
]
