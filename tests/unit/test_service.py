from unittest.mock import Mock

import pytest
import requests

from iyopt.errors import DecodeError
from iyopt.errors import EmptyRewardTokenError
from iyopt.errors import EmptyUserIDError
from iyopt.errors import ResourceNotFoundError
from iyopt.errors import ServiceError
from iyopt.errors import TransportError
from iyopt.model import Reward
from iyopt.model import Suggestion
from iyopt.nullable import NullableString
from iyopt.service import RemoteSuggestionService

from conftest import REWARD_URL
from conftest import SUGGEST_URL
from conftest import VALID_TOKEN
from conftest import make_response


@pytest.fixture
def service(mock_transport):
    return RemoteSuggestionService(
        transport=mock_transport,
        suggestion_url=SUGGEST_URL,
        reward_url=REWARD_URL,
    )


class TestFetchSuggestion:
    """test the suggestion call."""

    def test_empty_user_fails_without_request(self, service, mock_transport):
        # act & assert
        with pytest.raises(EmptyUserIDError):
            service.fetch_suggestion("")

        mock_transport.get.assert_not_called()

    def test_returns_decoded_suggestion(self, service):
        # act
        suggestion = service.fetch_suggestion("abc123")

        # assert
        assert suggestion == Suggestion(
            variant_code="v1",
            experiment_code="e1",
            content=NullableString.of('{"key":22}'),
            reward_token=NullableString.of("token1=="),
        )

    def test_requests_user_as_query_parameter(self, service, mock_transport):
        # act
        service.fetch_suggestion("abc123")

        # assert
        mock_transport.get.assert_called_once_with(f"{SUGGEST_URL}?user=abc123", timeout=None)

    def test_user_is_url_encoded(self, service, mock_transport):
        # act
        with pytest.raises(ResourceNotFoundError):
            service.fetch_suggestion("a b&c")

        # assert
        mock_transport.get.assert_called_once_with(f"{SUGGEST_URL}?user=a+b%26c", timeout=None)

    def test_not_found_carries_requested_url(self, service):
        # act & assert
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.fetch_suggestion("willnotexist")

        expected = f"{SUGGEST_URL}?user=willnotexist"
        assert exc_info.value.url == expected
        assert str(exc_info.value) == f"resource {expected} not found"

    def test_error_status_raises_service_error(self, service):
        # act & assert
        with pytest.raises(ServiceError) as exc_info:
            service.fetch_suggestion("badresponse")

        assert exc_info.value == ServiceError(message="problem", code=400)
        assert str(exc_info.value) == "[Code 400] problem"

    def test_undecodable_error_body_raises_decode_error(self, mock_transport):
        # arrange
        mock_transport.get.side_effect = None
        mock_transport.get.return_value = make_response(500, "<html>oops</html>")
        service = RemoteSuggestionService(mock_transport, SUGGEST_URL, REWARD_URL)

        # act & assert
        with pytest.raises(DecodeError, match="status 500"):
            service.fetch_suggestion("abc123")

    def test_undecodable_suggestion_raises_decode_error(self, mock_transport):
        # arrange
        mock_transport.get.side_effect = None
        mock_transport.get.return_value = make_response(200, '{"variant_id": ["v1"]}')
        service = RemoteSuggestionService(mock_transport, SUGGEST_URL, REWARD_URL)

        # act & assert
        with pytest.raises(DecodeError):
            service.fetch_suggestion("abc123")

    def test_null_suggestion_body_is_zero_suggestion(self, mock_transport):
        # arrange
        mock_transport.get.side_effect = None
        mock_transport.get.return_value = make_response(200, "null")
        service = RemoteSuggestionService(mock_transport, SUGGEST_URL, REWARD_URL)

        # act
        suggestion = service.fetch_suggestion("abc123")

        # assert
        assert suggestion == Suggestion(variant_code="", experiment_code="")

    def test_transport_failure_raises_transport_error(self, mock_transport):
        # arrange
        cause = requests.ConnectionError("connection refused")
        mock_transport.get.side_effect = cause
        service = RemoteSuggestionService(mock_transport, SUGGEST_URL, REWARD_URL)

        # act & assert
        with pytest.raises(TransportError) as exc_info:
            service.fetch_suggestion("abc123")

        assert exc_info.value.__cause__ is cause

    def test_timeout_is_passed_to_transport(self, mock_transport):
        # arrange
        service = RemoteSuggestionService(mock_transport, SUGGEST_URL, REWARD_URL, timeout=2.5)

        # act
        service.fetch_suggestion("abc123")

        # assert
        mock_transport.get.assert_called_once_with(f"{SUGGEST_URL}?user=abc123", timeout=2.5)


class TestPostReward:
    """test the reward call."""

    def test_empty_token_fails_without_request(self, service, mock_transport):
        # act & assert
        with pytest.raises(EmptyRewardTokenError):
            service.post_reward(Reward(token=""))

        mock_transport.post.assert_not_called()

    def test_accepted_token_returns_none(self, service):
        # act & assert
        assert service.post_reward(Reward(token=VALID_TOKEN)) is None

    def test_posts_token_as_form_field(self, service, mock_transport):
        # act
        service.post_reward(Reward(token=VALID_TOKEN))

        # assert
        mock_transport.post.assert_called_once_with(
            REWARD_URL,
            data={"token": VALID_TOKEN},
            timeout=None,
        )

    def test_rejected_token_raises_service_error(self, service):
        # act & assert
        with pytest.raises(ServiceError) as exc_info:
            service.post_reward(Reward(token="notvalid"))

        assert str(exc_info.value) == "[Code 400] reward problem"

    def test_non_204_success_status_is_an_error(self):
        # arrange
        transport = Mock(spec=requests.Session)
        transport.post.return_value = make_response(200, '{"message": "unexpected", "code": 200}')
        service = RemoteSuggestionService(transport, SUGGEST_URL, REWARD_URL)

        # act & assert
        with pytest.raises(ServiceError, match=r"\[Code 200\] unexpected"):
            service.post_reward(Reward(token=VALID_TOKEN))

    def test_empty_error_body_raises_decode_error(self):
        # arrange
        transport = Mock(spec=requests.Session)
        transport.post.return_value = make_response(502)
        service = RemoteSuggestionService(transport, SUGGEST_URL, REWARD_URL)

        # act & assert
        with pytest.raises(DecodeError):
            service.post_reward(Reward(token=VALID_TOKEN))

    def test_transport_failure_raises_transport_error(self):
        # arrange
        transport = Mock(spec=requests.Session)
        transport.post.side_effect = requests.Timeout("read timed out")
        service = RemoteSuggestionService(transport, SUGGEST_URL, REWARD_URL)

        # act & assert
        with pytest.raises(TransportError, match="read timed out"):
            service.post_reward(Reward(token=VALID_TOKEN))
