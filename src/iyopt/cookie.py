from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from email.utils import format_datetime

from iyopt.providers import SystemClock
from iyopt.providers import TimeSource

# roughly three years
DEFAULT_LIFETIME = timedelta(hours=26297)

EXPIRED_AT = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)


def _is_cookie_octet(char: str) -> bool:
    # space and comma pass here and force quoting below
    return 0x20 <= ord(char) < 0x7F and char not in '";\\'


def sanitize_cookie_value(value: str) -> str:
    """
    reduce a value to what a Set-Cookie header can carry verbatim.

    bytes outside the cookie-octet range (including ";" and '"') are
    dropped. values with a space or comma are wrapped in
    double quotes. "=" is kept, so base64 padding survives.
    """
    cleaned = "".join(char for char in value if _is_cookie_octet(char))
    if " " in cleaned or "," in cleaned:
        return f'"{cleaned}"'
    return cleaned


@dataclass(frozen=True)
class OutboundCookie:
    """a cookie the http layer must set on the outbound response."""

    name: str
    value: str
    expires: datetime
    domain: str | None = None
    path: str | None = "/"

    def to_header(self) -> str:
        """render as a Set-Cookie header value."""
        expires = self.expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)

        parts = [f"{self.name}={sanitize_cookie_value(self.value)}"]
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        parts.append(f"Expires={format_datetime(expires.astimezone(timezone.utc), usegmt=True)}")
        return "; ".join(parts)


@dataclass(frozen=True)
class ExpiringCookie:
    """named cookie template whose expiry is computed when it is issued."""

    name: str
    lifetime: timedelta = DEFAULT_LIFETIME
    domain: str | None = None
    path: str | None = "/"
    clock: TimeSource = field(default_factory=SystemClock, compare=False)

    def materialize(self, value: str) -> OutboundCookie:
        return OutboundCookie(
            name=self.name,
            value=value,
            expires=self.clock.now() + self.lifetime,
            domain=self.domain,
            path=self.path,
        )

    def expired(self) -> OutboundCookie:
        """cookie that clears this one in the browser."""
        return OutboundCookie(
            name=self.name,
            value="",
            expires=EXPIRED_AT,
            domain=self.domain,
            path=self.path,
        )
