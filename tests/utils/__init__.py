"""Shared test utilities."""

from .fake_backend import FakeBackend

__all__ = ["FakeBackend"]
