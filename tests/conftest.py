"""Pytest shared fixtures for the legacy user provider."""
import pathlib
import sys
import threading
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization
from flask import Flask, Response, jsonify, request
from werkzeug.serving import make_server

from rest_provider.core.http.client import HttpResponse


# ─────────────────────────────────────────────────────────────────────────────
# RSA Key Pair for JWT Testing
# ─────────────────────────────────────────────────────────────────────────────
def _key_pair(key_size: int) -> dict:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )

    public_key = private_key.public_key()
    public_pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )

    return {
        "private_key": private_key,
        "private_pem": private_pem.decode("ascii"),
        "public_key": public_key,
        "public_pem": public_pem.decode("ascii"),
    }


@pytest.fixture(scope="session")
def rsa_key_pair():
    """Generate RSA key pair for JWT signing in tests."""
    return _key_pair(2048)


@pytest.fixture(scope="session")
def large_rsa_key_pair():
    """4096-bit RSA key pair (selects RS512)."""
    return _key_pair(4096)


# ─────────────────────────────────────────────────────────────────────────────
# Stand-in for the legacy REST API
# ─────────────────────────────────────────────────────────────────────────────
class LegacyApiStub:
    """Flask app mimicking the legacy users endpoint.

    - GET  /users/<id>: 200 + user JSON when known, else 404
    - POST /users/<id>: 200 when {"password": ...} matches, else 401
    - required_authorization: when set, any other Authorization header gets 401
    - next_response: (body, status, content_type) served once instead of the above
    """

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.passwords: dict[str, str] = {}
        self.required_authorization: Optional[str] = None
        self.next_response: Optional[tuple] = None
        self.received: list[dict] = []
        self.base_url = ""
        self.app = self._build_app()

    @property
    def users_url(self) -> str:
        return f"{self.base_url}/users"

    @property
    def last_request(self) -> dict:
        return self.received[-1]

    def add_user(self, identifier: str, password: Optional[str] = None, **fields) -> dict:
        user = {"username": identifier, **fields}
        self.users[identifier] = user
        if password is not None:
            self.passwords[identifier] = password
        return user

    def _record(self, identifier: str) -> None:
        self.received.append({
            "method": request.method,
            "path": request.path,
            "raw_uri": request.environ.get("REQUEST_URI"),
            "identifier": identifier,
            "args": dict(request.args),
            "headers": dict(request.headers),
            "body": request.get_data(as_text=True),
        })

    def _canned(self):
        body, status, content_type = self.next_response
        self.next_response = None
        return Response(body, status=status, content_type=content_type)

    def _unauthorized(self) -> bool:
        if self.required_authorization is None:
            return False
        return request.headers.get("Authorization") != self.required_authorization

    def _build_app(self) -> Flask:
        app = Flask("legacy-api-stub")

        @app.get("/users/<path:identifier>")
        def get_user(identifier):
            self._record(identifier)
            if self.next_response is not None:
                return self._canned()
            if self._unauthorized():
                return jsonify({"error": "unauthorized"}), 401
            user = self.users.get(identifier)
            if user is None:
                return jsonify({"error": "not found"}), 404
            return jsonify(user)

        @app.post("/users/<path:identifier>")
        def check_password(identifier):
            self._record(identifier)
            if self.next_response is not None:
                return self._canned()
            if self._unauthorized():
                return jsonify({"error": "unauthorized"}), 401
            payload = request.get_json(silent=True) or {}
            expected = self.passwords.get(identifier)
            if expected is not None and payload.get("password") == expected:
                return "", 200
            return jsonify({"error": "invalid credentials"}), 401

        @app.get("/moved/<path:identifier>")
        def moved(identifier):
            self._record(identifier)
            return "", 302, {"Location": f"/users/{identifier}"}

        return app


@pytest.fixture()
def legacy_api():
    """Serve a LegacyApiStub on a random local port for the test's duration."""
    stub = LegacyApiStub()
    server = make_server("127.0.0.1", 0, stub.app, threaded=True)
    stub.base_url = f"http://127.0.0.1:{server.server_port}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield stub
    finally:
        server.shutdown()
        thread.join(timeout=5)


# ─────────────────────────────────────────────────────────────────────────────
# In-memory HTTP client double
# ─────────────────────────────────────────────────────────────────────────────
class RecordingHttpClient:
    """HttpClient double returning a canned response (or raising) and recording calls."""

    def __init__(self, response: Optional[HttpResponse] = None, error: Optional[BaseException] = None):
        self.response = response or HttpResponse(404)
        self.error = error
        self.calls: list[dict] = []

    def _handle(self, method: str, url: str, body: Optional[str], strategy) -> HttpResponse:
        self.calls.append({"method": method, "url": url, "body": body, "strategy": strategy})
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, strategy=None):
        return self._handle("GET", url, None, strategy)

    def post(self, url, body_as_json, strategy=None):
        return self._handle("POST", url, body_as_json, strategy)


@pytest.fixture()
def fake_http_client():
    """Factory for RecordingHttpClient instances."""
    return RecordingHttpClient
