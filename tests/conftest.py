# tests/conftest.py
import copy

import pytest
from botocore.exceptions import ClientError

from lambdas.error_monitor.models import get_settings


def make_client_error(operation: str = "GetItem", code: str = "ProvisionedThroughputExceededException") -> ClientError:
    """Builds a botocore ClientError like the ones DynamoDB and Bedrock raise."""
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised in test"}}, operation)


class FakeClock:
    """A controllable stand-in for time.time()."""
    def __init__(self, now: float = 1_718_631_060.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeTTLStore:
    """In-memory get/put-with-expiry store that honours TTLs against a FakeClock."""
    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.items = {}
        self.get_calls = []
        self.put_calls = []
        self.fail_get = False
        self.fail_put = False

    def get(self, key):
        self.get_calls.append(key)
        if self.fail_get:
            raise make_client_error("GetItem")
        item = self.items.get(key)
        if item is None or item[1] <= self.clock():
            return None
        return item[0]

    def put(self, key, value, ttl_seconds):
        self.put_calls.append((key, value, ttl_seconds))
        if self.fail_put:
            raise make_client_error("PutItem")
        self.items[key] = (value, self.clock() + ttl_seconds)


class FakeInference:
    """Records every run() call and replies with canned text per model id."""
    def __init__(self, replies=None, errors=None):
        self.replies = replies or {}
        self.errors = errors or {}
        self.calls = []

    def run(self, model_id, inputs):
        self.calls.append((model_id, inputs))
        if model_id in self.errors:
            raise self.errors[model_id]
        return {"response": self.replies.get(model_id, f"reply from {model_id}")}


SAMPLE_EVENT = {
    "outcome": "exception",
    "scriptName": "api",
    "eventTimestamp": 1718631060000,
    "event": {"request": {"url": "/orders/42", "method": "POST"}},
    "exceptions": [{"name": "TypeError", "message": "x is undefined"}],
    "logs": [],
}


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_event() -> dict:
    return copy.deepcopy(SAMPLE_EVENT)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ttl_store(clock) -> FakeTTLStore:
    return FakeTTLStore(clock)


@pytest.fixture
def inference() -> FakeInference:
    return FakeInference(replies={
        "analysis-model": "<think>look at x</think>x was never assigned before use.",
        "summary-model": "The handler read `x` before it was set. Initialize it before use.",
    })
