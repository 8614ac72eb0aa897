"""
Core statement pipeline

Segmentation, sequential execution, session state, keyword completion and
result hydration. Nothing here talks to AWS directly; backends are supplied
through the DataAPIBackend protocol.
"""

from .completion import SQLCompleter, complete_line
from .execution import ExecutionQueue, Statement
from .hydrate import hydrate_records
from .keywords import KeywordIndex, fetch_keywords
from .segmenter import StatementSegmenter
from .session import Session, TransactionState

__all__ = [
    "SQLCompleter",
    "complete_line",
    "ExecutionQueue",
    "Statement",
    "hydrate_records",
    "KeywordIndex",
    "fetch_keywords",
    "StatementSegmenter",
    "Session",
    "TransactionState",
]
