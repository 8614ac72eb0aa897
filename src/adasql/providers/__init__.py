"""
Backend providers for adasql

A provider turns the shell's statement pipeline into calls against a
concrete serverless SQL service.
"""

from .base.backend import DataAPIBackend, ExecuteResult

__all__ = [
    "DataAPIBackend",
    "ExecuteResult",
]
