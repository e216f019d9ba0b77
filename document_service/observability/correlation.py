"""
Correlation ID propagation.

The current ID lives in a ContextVar, so it follows a request across
await points and into run_in_threadpool workers, which copy the context.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def new_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Current correlation ID, empty outside a request or task."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation ID for the duration of a block.

    The previous value is restored on exit, including after an exception.

    Args:
        correlation_id: ID to bind, a new one is generated when empty

    Yields:
        str: The bound ID
    """
    correlation_id = correlation_id or new_correlation_id()
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)
