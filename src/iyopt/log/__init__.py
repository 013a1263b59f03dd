from iyopt.log.config import configure_logging
from iyopt.log.context import request_context

__all__ = [
    "configure_logging",
    "request_context",
]
