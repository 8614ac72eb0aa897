"""
adasql CLI Commands

Command implementations for the adasql CLI. The CLI layer (cli.py) acts as a
thin routing layer over these modules.
"""

from .connect import Connection, open_connection
from .shell import Shell, run_shell

__all__ = [
    "Connection",
    "open_connection",
    "Shell",
    "run_shell",
]
