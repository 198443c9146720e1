"""Context management for record-aware logging.

This module provides a context variable holding the name of the record
currently being encoded or decoded, which the log formatter prints.
"""

from contextvars import ContextVar

# Context variable to store the current record name
current_record: ContextVar[str | None] = ContextVar("current_record", default=None)
