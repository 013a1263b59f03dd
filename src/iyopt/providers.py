from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from datetime import timezone


class TimeSource(ABC):
    """supplies the current time used to compute cookie expiry."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(TimeSource):

    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc)


class FixedClock(TimeSource):
    """always reports the same instant."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


class IdentifierGenerator(ABC):
    """supplies identifiers for visitors seen without an identity cookie.

    generate() may raise; the error reaches the caller unchanged.
    """

    @abstractmethod
    def generate(self) -> str:
        ...


class UUID4Generator(IdentifierGenerator):

    def generate(self) -> str:
        return str(uuid.uuid4())
