"""Exceptions shared across the service."""

from __future__ import annotations

from typing import Any, Optional


class StonksError(Exception):
    """Base exception for all app-specific errors."""


class ValidationError(StonksError):
    """Raised when a provider response is missing a required field."""

    def __init__(self, symbol: str, field: str) -> None:
        super().__init__(f"could not get '{field}' for '{symbol}'")
        self.symbol = symbol
        self.field = field


class ProviderError(StonksError):
    """Raised on a transport failure or a non-success provider status."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class PersistenceError(StonksError):
    """Raised when a store operation fails."""


class ConfigurationError(StonksError):
    """Raised for an unsupported input value, e.g. a disallowed currency."""

    def __init__(self, message: str, value: Optional[str] = None) -> None:
        super().__init__(message)
        self.value = value
