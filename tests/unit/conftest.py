import json
from datetime import datetime
from datetime import timezone
from unittest.mock import Mock

import pytest
import requests

from iyopt.client import Client
from iyopt.providers import FixedClock
from iyopt.providers import IdentifierGenerator

BASE_URL = "http://lab.test/v1"
SUGGEST_URL = f"{BASE_URL}/accounts/123/labs/l1/suggest"
REWARD_URL = f"{BASE_URL}/reward"

VALID_TOKEN = "secretToken=="

SUGGESTION_BODY = json.dumps({
    "variant_id": "v1",
    "experiment_id": "e1",
    "content": '{"key":22}',
    "reward_token": "token1==",
})


class StaticIdentifierGenerator(IdentifierGenerator):
    def __init__(self, value: str = "newuserid"):
        self.value = value
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return self.value


class FailingIdentifierGenerator(IdentifierGenerator):
    def generate(self) -> str:
        raise OSError("entropy source unavailable")


def make_response(status_code: int, body: str = "") -> Mock:
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.content = body.encode()
    return response


def lab_handler(method: str, url: str, data: dict | None = None) -> Mock:
    """stand-in for the remote lab service, keyed on method and url"""
    if method == "GET" and url in (
        f"{SUGGEST_URL}?user=abc123",
        f"{SUGGEST_URL}?user=newuserid",
    ):
        return make_response(200, SUGGESTION_BODY)
    if method == "GET" and url == f"{SUGGEST_URL}?user=rewarded":
        return make_response(200, '{"variant_id": "v2", "experiment_id": "e2"}')
    if method == "GET" and url == f"{SUGGEST_URL}?user=badresponse":
        return make_response(400, '{"message": "problem", "code": 400}')
    if method == "POST" and url == REWARD_URL:
        if (data or {}).get("token") != VALID_TOKEN:
            return make_response(400, '{"message": "reward problem", "code": 400}')
        return make_response(204)
    return make_response(404)


@pytest.fixture
def mock_transport():
    """mocked requests session routed through lab_handler"""
    transport = Mock(spec=requests.Session)
    transport.get.side_effect = lambda url, **kwargs: lab_handler("GET", url)
    transport.post.side_effect = lambda url, data=None, **kwargs: lab_handler("POST", url, data)
    return transport


@pytest.fixture
def fixed_now():
    return datetime(2015, 2, 3, 0, 2, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock(fixed_now):
    return FixedClock(fixed_now)


@pytest.fixture
def id_generator():
    return StaticIdentifierGenerator()


@pytest.fixture
def lab_client(mock_transport, id_generator, fixed_clock):
    """client for account 123, lab l1, wired to the stub lab"""
    return Client(
        123,
        "l1",
        base_url=BASE_URL,
        transport=mock_transport,
        id_generator=id_generator,
        clock=fixed_clock,
    )
