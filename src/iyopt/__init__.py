from iyopt.client import Client
from iyopt.client import SuggestionResult
from iyopt.cookie import ExpiringCookie
from iyopt.cookie import OutboundCookie
from iyopt.errors import IyoptError
from iyopt.errors import EmptyUserIDError
from iyopt.errors import EmptyRewardTokenError
from iyopt.errors import NoRewardCookieError
from iyopt.errors import ResourceNotFoundError
from iyopt.errors import ServiceError
from iyopt.errors import DecodeError
from iyopt.errors import TransportError
from iyopt.model import Reward
from iyopt.model import Suggestion
from iyopt.nullable import NullableString
from iyopt.providers import TimeSource
from iyopt.providers import SystemClock
from iyopt.providers import FixedClock
from iyopt.providers import IdentifierGenerator
from iyopt.providers import UUID4Generator

__all__ = [
    # client
    "Client",
    "SuggestionResult",
    # cookies
    "ExpiringCookie",
    "OutboundCookie",
    # errors
    "IyoptError",
    "EmptyUserIDError",
    "EmptyRewardTokenError",
    "NoRewardCookieError",
    "ResourceNotFoundError",
    "ServiceError",
    "DecodeError",
    "TransportError",
    # models
    "Reward",
    "Suggestion",
    "NullableString",
    # providers
    "TimeSource",
    "SystemClock",
    "FixedClock",
    "IdentifierGenerator",
    "UUID4Generator",
]
