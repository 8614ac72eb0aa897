"""Domain layer contracts (errors and shared models)."""

from .errors import (
    AdaSQLDomainError,
    BackendError,
    ConnectionSetupError,
    HydrationError,
)

__all__ = [
    "AdaSQLDomainError",
    "BackendError",
    "ConnectionSetupError",
    "HydrationError",
]
