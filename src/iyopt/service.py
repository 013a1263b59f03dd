from __future__ import annotations

import json
import logging
from urllib.parse import urlencode

import requests

from iyopt.errors import DecodeError
from iyopt.errors import EmptyRewardTokenError
from iyopt.errors import EmptyUserIDError
from iyopt.errors import ResourceNotFoundError
from iyopt.errors import ServiceError
from iyopt.errors import TransportError
from iyopt.model import Reward
from iyopt.model import Suggestion

logger = logging.getLogger(__name__)


class RemoteSuggestionService:
    """
    suggestion and reward calls against the remote lab service.

    every call is a single blocking round trip through the transport. there
    is no retry; failures are raised once.
    """

    def __init__(
        self,
        transport: requests.Session,
        suggestion_url: str,
        reward_url: str,
        timeout: float | None = None,
    ):
        self._transport = transport
        self._suggestion_url = suggestion_url
        self._reward_url = reward_url
        self._timeout = timeout

    @property
    def suggestion_url(self) -> str:
        return self._suggestion_url

    @property
    def reward_url(self) -> str:
        return self._reward_url

    def fetch_suggestion(self, user: str) -> Suggestion:
        """
        fetch the variant suggested for a user.

        raises:
            EmptyUserIDError: if user is empty, no request is made
            ResourceNotFoundError: if the service answers 404
            ServiceError: if the service answers any other non-200 status
            DecodeError: if a response body cannot be decoded
            TransportError: if the request fails before a response
        """
        if not user:
            raise EmptyUserIDError()

        url = f"{self._suggestion_url}?{urlencode({'user': user})}"
        logger.debug("requesting suggestion: %s", url)
        try:
            response = self._transport.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(f"suggestion request failed: {e}") from e

        logger.debug("suggestion response status: %d", response.status_code)
        if response.status_code == 404:
            raise ResourceNotFoundError(url)
        if response.status_code != 200:
            raise self._service_error(response)
        return Suggestion.decode(response.content)

    def post_reward(self, reward: Reward) -> None:
        """
        report the reward for a previously suggested variant.

        raises:
            EmptyRewardTokenError: if the token is empty, no request is made
            ServiceError: if the service answers anything but 204
            DecodeError: if the error body cannot be decoded
            TransportError: if the request fails before a response
        """
        if not reward.token:
            raise EmptyRewardTokenError()

        logger.debug("posting reward: %s", self._reward_url)
        try:
            response = self._transport.post(
                self._reward_url,
                data={"token": reward.token},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"reward request failed: {e}") from e

        logger.debug("reward response status: %d", response.status_code)
        if response.status_code == 204:
            return
        raise self._service_error(response)

    @staticmethod
    def _service_error(response: requests.Response) -> ServiceError:
        try:
            data = json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"invalid error body (status {response.status_code}): {e}"
            ) from e
        return ServiceError.from_dict(data)
