"""Base provider contracts."""

from .backend import DataAPIBackend, ExecuteResult

__all__ = ["DataAPIBackend", "ExecuteResult"]
