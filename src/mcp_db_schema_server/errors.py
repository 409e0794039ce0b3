"""
Errors raised by the schema resources and tools
"""

from contextlib import contextmanager
from typing import Iterator


class SchemaToolError(Exception):
    """Base class for every failure surfaced to tool and resource callers"""


class ValidationError(SchemaToolError):
    """Input rejected before any database call"""


class NotFoundError(SchemaToolError):
    """Referenced table is not present in the database"""


class ExecutionError(SchemaToolError):
    """Database lookup, query or statement failed"""


@contextmanager
def wrap_errors(prefix: str) -> Iterator[None]:
    """Re-raise failures with an operation-specific message prefix.

    Errors that already carry a kind keep it; anything else is reported as
    an ExecutionError. The original exception stays reachable as __cause__.
    """
    try:
        yield
    except SchemaToolError as e:
        raise type(e)(f"{prefix}{e}") from e
    except Exception as e:
        raise ExecutionError(f"{prefix}{e}") from e
