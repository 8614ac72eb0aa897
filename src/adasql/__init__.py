"""
adasql

Interactive SQL shell for Aurora Serverless databases over the RDS Data API.
"""

__version__ = "0.1.0"

from .models import AWSInfo, ColumnDescriptor, ConnectionConfig, StatementResult

__all__ = [
    "__version__",
    "AWSInfo",
    "ColumnDescriptor",
    "ConnectionConfig",
    "StatementResult",
]
