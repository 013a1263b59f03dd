from __future__ import annotations

import uuid
from contextvars import ContextVar
from contextlib import contextmanager
from typing import Iterator

# id of the inbound http request being served, stamped on every record
_inbound_request: ContextVar[str | None] = ContextVar("iyopt_inbound_request", default=None)


def get_request_id() -> str | None:
    return _inbound_request.get()


@contextmanager
def request_context(request_id: str | None = None) -> Iterator[str]:
    """bind the X-Request-ID of an inbound request, or a fresh one, for the block."""
    bound = request_id or uuid.uuid4().hex
    token = _inbound_request.set(bound)
    try:
        yield bound
    finally:
        _inbound_request.reset(token)
