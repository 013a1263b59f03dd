from __future__ import annotations

import logging
import sys

from iyopt.config import IyoptSettings
from iyopt.log.formatters import JSONFormatter
from iyopt.log.formatters import TextFormatter

# loggers that narrate every transport round trip
_QUIET_LOGGERS = ("urllib3", "uvicorn.access")


class LabHandler(logging.StreamHandler):
    """stdout handler installed by configure_logging."""


def configure_logging(settings: IyoptSettings | None = None) -> LabHandler:
    """
    route root logging to stdout for the configured lab.

    args:
        settings: level (IYOPT_LOG_LEVEL), format (IYOPT_LOG_FORMAT) and the
            account/lab stamped on each record; read from the environment
            when omitted

    returns:
        the installed handler. a handler from an earlier call is replaced;
        handlers installed by anything else are left in place.
    """
    settings = settings or IyoptSettings()
    level = getattr(logging, settings.log_level)
    formatter_cls = JSONFormatter if settings.log_format == "json" else TextFormatter

    root = logging.getLogger()
    for existing in root.handlers[:]:
        if isinstance(existing, LabHandler):
            root.removeHandler(existing)

    handler = LabHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter_cls(account_id=settings.account_id, lab_id=settings.lab_id))
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
