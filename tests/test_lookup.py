import pytest
import requests

from japroof.errors import AppError, ErrorCode
from japroof.lookup import BASE_URL, USER_AGENT, TermSummary, WikipediaClient


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self.payload = payload

    def json(self):
        if self.payload is None:
            raise ValueError("no json")
        return self.payload


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.requests.append((url, headers, timeout))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_summary_and_cache():
    session = FakeSession(FakeResponse(200, {"title": "Kubernetes", "extract": "コンテナ管理"}))
    client = WikipediaClient(session=session, timeout=2.0)
    assert client.get_summary("kubernetes") == TermSummary("Kubernetes", "コンテナ管理")
    assert client.get_summary(" kubernetes ") == TermSummary("Kubernetes", "コンテナ管理")
    assert len(session.requests) == 1
    url, headers, timeout = session.requests[0]
    assert url == f"{BASE_URL}/kubernetes"
    assert headers["User-Agent"] == USER_AGENT
    assert timeout == 2.0


def test_term_is_url_quoted():
    session = FakeSession(FakeResponse(404))
    WikipediaClient(session=session).get_summary("Node.js/ランタイム")
    assert session.requests[0][0] == f"{BASE_URL}/Node.js%2F%E3%83%A9%E3%83%B3%E3%82%BF%E3%82%A4%E3%83%A0"


def test_not_found_is_cached():
    session = FakeSession(FakeResponse(404))
    client = WikipediaClient(session=session)
    assert client.get_summary("nosuchterm") is None
    assert client.get_summary("nosuchterm") is None
    assert len(session.requests) == 1


def test_not_found_type():
    session = FakeSession(FakeResponse(200, {"type": "https://mediawiki.org/wiki/HyperSwitch/errors/not_found"}))
    assert WikipediaClient(session=session).get_summary("x") is None


def test_blank_term_is_not_requested():
    session = FakeSession()
    assert WikipediaClient(session=session).get_summary("  ") is None
    assert session.requests == []


@pytest.mark.parametrize("response, code", [
    (FakeResponse(429), ErrorCode.WIKIPEDIA_RATE_LIMIT),
    (FakeResponse(500), ErrorCode.WIKIPEDIA_REQUEST_FAILED),
    (FakeResponse(200), ErrorCode.WIKIPEDIA_REQUEST_FAILED),
    (requests.Timeout("slow"), ErrorCode.WIKIPEDIA_TIMEOUT),
    (requests.ConnectionError("down"), ErrorCode.WIKIPEDIA_REQUEST_FAILED),
])
def test_failures_raise_app_error(response, code):
    client = WikipediaClient(session=FakeSession(response))
    with pytest.raises(AppError) as exc:
        client.get_summary("term")
    assert exc.value.code is code


def test_failures_are_not_cached():
    session = FakeSession(requests.Timeout("slow"), FakeResponse(200, {"title": "Term"}))
    client = WikipediaClient(session=session)
    with pytest.raises(AppError):
        client.get_summary("term")
    assert client.get_summary("term").title == "Term"


def test_cache_expires():
    clock = Clock()
    session = FakeSession(FakeResponse(200, {"title": "A"}), FakeResponse(200, {"title": "B"}))
    client = WikipediaClient(session=session, cache_ttl=10.0, clock=clock)
    assert client.get_summary("a").title == "A"
    clock.now = 5.0
    assert client.get_summary("a").title == "A"
    clock.now = 20.0
    assert client.get_summary("a").title == "B"


def test_cache_evicts_least_recently_used():
    session = FakeSession(*(FakeResponse(200, {"title": t}) for t in ("A", "B", "C", "A2")))
    client = WikipediaClient(session=session, cache_size=2)
    client.get_summary("a")
    client.get_summary("b")
    client.get_summary("c")
    assert client.get_summary("a").title == "A2"
    assert len(session.requests) == 4


def test_clear_cache():
    session = FakeSession(FakeResponse(200, {"title": "A"}), FakeResponse(200, {"title": "A"}))
    client = WikipediaClient(session=session)
    client.get_summary("a")
    client.clear_cache()
    client.get_summary("a")
    assert len(session.requests) == 2


def test_injected_session_is_not_closed():
    session = FakeSession()
    with WikipediaClient(session=session):
        pass
    assert not session.closed
