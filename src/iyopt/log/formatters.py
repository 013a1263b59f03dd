from __future__ import annotations

import json
import logging
from datetime import datetime
from datetime import timezone
from typing import Any

from iyopt.log.context import get_request_id


class LabFormatter(logging.Formatter):
    """stamps every record with the lab it was emitted for.

    the lab comes from settings at configure time; request_id and the
    status_code passed through `extra=` are added when present.
    """

    def __init__(self, account_id: int, lab_id: str):
        super().__init__()
        self._account_id = account_id
        self._lab_id = lab_id

    def lab_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        fields: dict[str, Any] = {"account_id": self._account_id, "lab_id": self._lab_id}
        request_id = get_request_id()
        if request_id:
            fields["request_id"] = request_id
        status_code = getattr(record, "status_code", None)
        if status_code is not None:
            fields["status_code"] = status_code
        return fields


class JSONFormatter(LabFormatter):

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self.lab_fields(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(LabFormatter):

    def format(self, record: logging.LogRecord) -> str:
        fields = self.lab_fields(record)
        created = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        tags = [f"lab={fields['account_id']}/{fields['lab_id']}"]
        if "request_id" in fields:
            tags.append(f"req={fields['request_id'][:8]}")
        if "status_code" in fields:
            tags.append(f"status={fields['status_code']}")

        line = f"{created} {record.levelname:<8} {record.name} [{' '.join(tags)}] {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
