from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from datetime import timedelta
from typing import Mapping

import requests

from iyopt.config import IyoptSettings
from iyopt.cookie import DEFAULT_LIFETIME
from iyopt.cookie import ExpiringCookie
from iyopt.cookie import OutboundCookie
from iyopt.errors import NoRewardCookieError
from iyopt.model import Reward
from iyopt.model import Suggestion
from iyopt.providers import IdentifierGenerator
from iyopt.providers import SystemClock
from iyopt.providers import TimeSource
from iyopt.providers import UUID4Generator
from iyopt.service import RemoteSuggestionService

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://bandits.incisive.ly/v1"
SUGGEST_PATH = "/accounts/{account_id}/labs/{lab_id}/suggest"
REWARD_PATH = "/reward"

USER_COOKIE_NAME = "iyV"
REWARD_COOKIE_PREFIX = "iyR-"


@dataclass(frozen=True)
class SuggestionResult:
    """suggestion plus the cookies the http layer must set."""

    suggestion: Suggestion
    cookies: list[OutboundCookie] = field(default_factory=list)


class Client:
    """
    lab client bound to one (account, lab) pair.

    reads identity and pending-reward cookies from inbound requests and
    returns the cookies to write back. the client itself holds no per-request
    state, but the default transport is a requests.Session, which requests
    does not document as thread-safe. callers serving requests from several
    threads should pass their own transport, for example one session per
    thread.
    """

    def __init__(
        self,
        account_id: int,
        lab_id: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        domain: str | None = None,
        transport: requests.Session | None = None,
        id_generator: IdentifierGenerator | None = None,
        clock: TimeSource | None = None,
        timeout: float | None = None,
        cookie_lifetime: timedelta = DEFAULT_LIFETIME,
        user_cookie_name: str = USER_COOKIE_NAME,
        reward_cookie_prefix: str = REWARD_COOKIE_PREFIX,
    ):
        base_url = base_url.rstrip("/")
        clock = clock or SystemClock()

        self.account_id = account_id
        self.lab_id = lab_id
        self._owns_transport = transport is None
        self._transport = transport or requests.Session()
        self._id_generator = id_generator or UUID4Generator()

        self.suggestion_url = base_url + SUGGEST_PATH.format(
            account_id=account_id, lab_id=lab_id
        )
        self.reward_url = base_url + REWARD_PATH
        self.user_cookie = ExpiringCookie(
            name=user_cookie_name,
            lifetime=cookie_lifetime,
            domain=domain,
            clock=clock,
        )
        self.reward_cookie = ExpiringCookie(
            name=f"{reward_cookie_prefix}{lab_id}",
            lifetime=cookie_lifetime,
            domain=domain,
            clock=clock,
        )
        self._service = RemoteSuggestionService(
            transport=self._transport,
            suggestion_url=self.suggestion_url,
            reward_url=self.reward_url,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: IyoptSettings, **kwargs) -> "Client":
        options = {
            "base_url": settings.base_url,
            "domain": settings.domain,
            "timeout": settings.request_timeout,
            "cookie_lifetime": settings.cookie_lifetime,
            "user_cookie_name": settings.user_cookie_name,
            "reward_cookie_prefix": settings.reward_cookie_prefix,
        }
        options.update(kwargs)
        return cls(settings.account_id, settings.lab_id, **options)

    @property
    def transport(self) -> requests.Session:
        return self._transport

    @property
    def id_generator(self) -> IdentifierGenerator:
        return self._id_generator

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def suggestion(self, user: str) -> Suggestion:
        return self._service.fetch_suggestion(user)

    def reward(self, reward: Reward) -> None:
        self._service.post_reward(reward)

    def suggest_for_request(self, cookies: Mapping[str, str]) -> SuggestionResult:
        """
        resolve the visitor and fetch their suggestion.

        args:
            cookies: cookies sent with the inbound request, by name

        returns:
            SuggestionResult carrying a new identity cookie when the visitor
            had none, and a reward cookie when the suggestion has a token

        raises:
            any error from the id generator or the suggestion call; no cookies
            are issued in that case
        """
        outbound: list[OutboundCookie] = []

        user_id = cookies.get(self.user_cookie.name)
        if user_id is None:
            user_id = self._id_generator.generate()
            logger.debug("issued new user id for cookie %s", self.user_cookie.name)
            outbound.append(self.user_cookie.materialize(user_id))

        suggestion = self._service.fetch_suggestion(user_id)

        if suggestion.reward_token.valid:
            outbound.append(self.reward_cookie.materialize(suggestion.reward_token.value))

        return SuggestionResult(suggestion=suggestion, cookies=outbound)

    def reward_for_request(self, cookies: Mapping[str, str]) -> list[OutboundCookie]:
        """
        submit the pending reward token carried by the inbound request.

        returns:
            the cookie clearing the reward token

        raises:
            NoRewardCookieError: if the request has no reward cookie
            any error from the reward call; the reward cookie is left in
            place so the caller can retry
        """
        token = cookies.get(self.reward_cookie.name)
        if token is None:
            raise NoRewardCookieError()

        self._service.post_reward(Reward(token=token))
        return [self.reward_cookie.expired()]
