"""Unit tests for the legacy API HTTP client, with injected sessions."""
import pytest
import requests

from rest_provider.core.http.client import HttpClient, HttpResponse, _charset_from_content_type
from rest_provider.core.http.exceptions import HttpRequestError


# ─────────────────────────────────────────────────────────────────────────────
# Session doubles
# ─────────────────────────────────────────────────────────────────────────────
class _StubResponse:
    def __init__(self, status_code=200, content=b"{}", headers=None, read_error=None):
        self.status_code = status_code
        self.headers = headers or {"Content-Type": "application/json"}
        self._content = content
        self._read_error = read_error
        self.closed = False

    @property
    def content(self):
        if self._read_error is not None:
            raise self._read_error
        return self._content

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


class _StubSession:
    def __init__(self, response=None, send_error=None):
        self.response = response
        self.send_error = send_error
        self.sent = []
        self.send_kwargs = None
        self.closed = False

    def prepare_request(self, request):
        return request.prepare()

    def send(self, prepared, **kwargs):
        self.sent.append(prepared)
        self.send_kwargs = kwargs
        if self.send_error is not None:
            raise self.send_error
        return self.response

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


# ─────────────────────────────────────────────────────────────────────────────
# With injected sessions
# ─────────────────────────────────────────────────────────────────────────────
def test_send_uses_timeout_and_redirects():
    session = _StubSession(response=_StubResponse())

    HttpClient(timeout=1.5, session_factory=lambda: session).get("http://legacy.local/users/alice")

    assert session.send_kwargs["timeout"] == 1.5
    assert session.send_kwargs["allow_redirects"] is True
    assert session.send_kwargs["stream"] is True


def test_timeout_is_wrapped_and_session_closed():
    session = _StubSession(send_error=requests.Timeout("read timed out"))

    with pytest.raises(HttpRequestError) as excinfo:
        HttpClient(session_factory=lambda: session).post("http://legacy.local/users/alice", "{}")

    assert isinstance(excinfo.value.cause, requests.Timeout)
    assert excinfo.value.method == "POST"
    assert session.closed


def test_stream_error_during_body_read_is_wrapped():
    response = _StubResponse(read_error=requests.exceptions.ChunkedEncodingError("connection broken"))
    session = _StubSession(response=response)

    with pytest.raises(HttpRequestError) as excinfo:
        HttpClient(session_factory=lambda: session).get("http://legacy.local/users/alice")

    assert isinstance(excinfo.value.cause, requests.exceptions.ChunkedEncodingError)
    assert response.closed
    assert session.closed


def test_non_200_body_is_never_read():
    response = _StubResponse(status_code=500, read_error=AssertionError("body must not be read"))
    session = _StubSession(response=response)

    result = HttpClient(session_factory=lambda: session).get("http://legacy.local/users/alice")

    assert result == HttpResponse(500, None)
    assert response.closed
    assert session.closed


def test_invalid_url_is_wrapped():
    with pytest.raises(HttpRequestError):
        HttpClient().get("not a url")


def test_unknown_charset_falls_back_to_utf8():
    response = _StubResponse(content="zoë".encode("utf-8"), headers={"Content-Type": "text/plain; charset=x-unknown"})
    session = _StubSession(response=response)

    result = HttpClient(session_factory=lambda: session).get("http://legacy.local/users/zoe")

    assert result.body == "zoë"


@pytest.mark.parametrize("content_type,expected", [
    (None, None),
    ("application/json", None),
    ("application/json; charset=ISO-8859-1", "ISO-8859-1"),
    ('text/plain; format=flowed; Charset="utf-16"', "utf-16"),
    ("application/json; charset=", None),
])
def test_charset_from_content_type(content_type, expected):
    assert _charset_from_content_type(content_type) == expected
