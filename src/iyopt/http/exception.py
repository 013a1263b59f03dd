from __future__ import annotations

from typing import Any

from iyopt.errors import DecodeError
from iyopt.errors import EmptyRewardTokenError
from iyopt.errors import EmptyUserIDError
from iyopt.errors import IyoptError
from iyopt.errors import NoRewardCookieError
from iyopt.errors import ResourceNotFoundError
from iyopt.errors import ServiceError
from iyopt.errors import TransportError

# 4xx: the inbound request was unusable, 5xx: the lab service failed us
STATUS_CODES: dict[type[IyoptError], int] = {
    EmptyUserIDError: 400,
    EmptyRewardTokenError: 400,
    NoRewardCookieError: 404,
    ResourceNotFoundError: 404,
    ServiceError: 502,
    DecodeError: 502,
    TransportError: 503,
}


def status_code_for(exc: IyoptError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


def to_dict(exc: IyoptError) -> dict[str, Any]:
    response: dict[str, Any] = {"detail": str(exc)}
    context = exc.context()
    if context:
        response["context"] = context
    return response
