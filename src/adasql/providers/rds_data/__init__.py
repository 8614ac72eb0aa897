"""
RDS Data API provider for adasql
"""

from .auth import AuthenticationError, create_aws_session, get_aws_info
from .backend import RdsDataBackend
from .discovery import get_database_cluster, get_secret

__all__ = [
    "AuthenticationError",
    "create_aws_session",
    "get_aws_info",
    "RdsDataBackend",
    "get_database_cluster",
    "get_secret",
]
