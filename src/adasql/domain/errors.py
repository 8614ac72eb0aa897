"""Unified domain error taxonomy for the shell."""

from dataclasses import dataclass


@dataclass(slots=True)
class AdaSQLDomainError(Exception):
    """Base class for application/domain-level failures."""

    message: str
    code: str

    def __str__(self) -> str:
        return self.message


class ConnectionSetupError(AdaSQLDomainError):
    """Raised when the shell cannot establish a usable connection at startup."""


class BackendError(AdaSQLDomainError):
    """Raised when a Data API call fails."""

    def describe(self) -> str:
        """Render as ``message (code)`` for statement output."""
        return f"{self.message} ({self.code})"


class HydrationError(AdaSQLDomainError):
    """Raised when a wire value cannot be decoded into a row value."""
