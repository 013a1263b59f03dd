from __future__ import annotations

from typing import Any


class IyoptError(Exception):
    """
    base exception for all client errors.

    subclasses should define:
        detail: str - default error message

    instances can override detail with a custom message.
    """

    detail: str = "iyopt error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.detail
        super().__init__(self.detail)

    def context(self) -> dict[str, Any]:
        """extra fields describing the error, empty by default."""
        return {}


# input validation, raised before any network call


class EmptyUserIDError(IyoptError):
    """suggestion requested without a user id."""

    detail = "empty user id"


class EmptyRewardTokenError(IyoptError):
    """reward submitted without a token."""

    detail = "empty reward token"


class NoRewardCookieError(IyoptError):
    """inbound request carries no pending reward token."""

    detail = "no reward cookie found"


# remote outcomes


class ResourceNotFoundError(IyoptError):
    """remote service answered 404 for the requested url."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"resource {url} not found")

    def context(self) -> dict[str, Any]:
        return {"url": self.url}


class ServiceError(IyoptError):
    """structured error body reported by the remote service."""

    def __init__(self, message: str, code: int):
        self.message = message
        self.code = code
        super().__init__(f"[Code {code}] {message}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceError):
            return NotImplemented
        return (self.message, self.code) == (other.message, other.code)

    def __hash__(self) -> int:
        return hash((self.message, self.code))

    def context(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}

    @classmethod
    def from_dict(cls, data: Any) -> "ServiceError":
        # a null body carries no detail
        if data is None:
            return cls(message="", code=0)
        if not isinstance(data, dict):
            raise DecodeError(f"cannot decode {json_type(data)} into service error")

        message = data.get("message", "")
        code = data.get("code", 0)
        if not isinstance(message, str):
            raise DecodeError(f"cannot decode {json_type(message)} into service error message")
        if isinstance(code, bool) or not isinstance(code, int):
            raise DecodeError(f"cannot decode {json_type(code)} into service error code")
        return cls(message=message, code=code)


# local failures


class DecodeError(IyoptError):
    """response body could not be decoded."""

    detail = "decode failed"


class TransportError(IyoptError):
    """request never produced a response."""

    detail = "transport failed"


def json_type(value: Any) -> str:
    """name of the json type a decoded python value came from."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"
