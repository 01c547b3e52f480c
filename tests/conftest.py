"""
Shared test fixtures and configuration.

``kasm_server`` runs a tiny in-process HTTP server that speaks the Kasm
API shape (POST /api/<path>, JSON in, JSON out) so the client and the
CLI can be exercised end to end without a real deployment.
"""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

from kasmctl.core.models.config import Context, KasmConfig
from kasmctl.core.config.loader import save_config_to


class FakeKasm:
    """Canned responses keyed by API path, plus a log of received requests."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.requests: list[tuple[str, dict]] = []
        self.truncated: set[str] = set()
        self.url = ""

    def respond(self, path: str, body: object = None, status: int = 200) -> None:
        """Answer POST /api/<path> with ``body`` encoded as JSON."""
        self.routes[path] = (status, json.dumps(body if body is not None else {}).encode())

    def respond_raw(self, path: str, raw: bytes, status: int = 200) -> None:
        self.routes[path] = (status, raw)

    def respond_truncated(self, path: str, body: object) -> None:
        """Announce a longer body than is sent, then close the connection."""
        self.respond(path, body)
        self.truncated.add(path)

    def bodies(self, path: str) -> list[dict]:
        return [body for p, body in self.requests if p == path]

    def paths(self) -> list[str]:
        return [p for p, _ in self.requests]


def _make_handler(fake: FakeKasm):
    class Handler(BaseHTTPRequestHandler):
        def do_POST(self) -> None:
            length = int(self.headers.get("Content-Length", 0))
            raw = self.rfile.read(length) if length else b""
            try:
                payload = json.loads(raw or b"{}")
            except ValueError:
                payload = {}

            path = self.path.split("?", 1)[0]
            path = path[len("/api/"):] if path.startswith("/api/") else path.lstrip("/")
            fake.requests.append((path, payload))

            status, body = fake.routes.get(path, (404, b'{"error": "not found"}'))
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            declared = len(body) + (64 if path in fake.truncated else 0)
            self.send_header("Content-Length", str(declared))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, fmt, *args) -> None:
            pass

    return Handler


@pytest.fixture
def kasm_server(monkeypatch):
    """A running fake Kasm API; ``.url`` is its base URL."""
    for var in ("http_proxy", "HTTP_PROXY", "https_proxy", "HTTPS_PROXY", "all_proxy", "ALL_PROXY"):
        monkeypatch.delenv(var, raising=False)
    fake = FakeKasm()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(fake))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    fake.url = f"http://127.0.0.1:{server.server_address[1]}"
    try:
        yield fake
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch) -> Path:
    """Point KASMCTL_CONFIG at a fresh (not yet existing) file."""
    path = tmp_path / "kasmctl" / "config.yaml"
    monkeypatch.setenv("KASMCTL_CONFIG", str(path))
    monkeypatch.delenv("KASMCTL_API_KEY", raising=False)
    monkeypatch.delenv("KASMCTL_API_SECRET", raising=False)
    return path


@pytest.fixture
def kasm_context(kasm_server: FakeKasm) -> Context:
    return Context(server=kasm_server.url, api_key="key", api_secret="secret")


@pytest.fixture
def configured(config_file: Path, kasm_context: Context) -> Path:
    """A config file whose current context talks to ``kasm_server``."""
    cfg = KasmConfig()
    cfg.set_context("test", kasm_context)
    save_config_to(config_file, cfg)
    return config_file


def _session_payload(kasm_id: str, **fields) -> dict:
    data = {
        "kasm_id": kasm_id,
        "user_id": "u-1",
        "image_id": "img-1",
        "username": "alice@example.com",
        "operational_status": "running",
        "created_date": "2024-01-01 10:00:00",
        "keepalive_date": "2024-01-01 11:00:00",
        "hostname": "agent-1",
        "image": {"friendly_name": "Ubuntu Desktop", "name": "kasmweb/ubuntu:1.16"},
    }
    data.update(fields)
    return data


def _image_payload(image_id: str, **fields) -> dict:
    data = {
        "image_id": image_id,
        "friendly_name": "Ubuntu Desktop",
        "name": "kasmweb/ubuntu:1.16",
        "enabled": True,
        "cores": 2.0,
        "memory": 2147483648,
        "image_src": "Container",
    }
    data.update(fields)
    return data


@pytest.fixture
def make_session():
    """Factory for session payloads as the Kasm API returns them."""
    return _session_payload


@pytest.fixture
def make_image():
    """Factory for image payloads as the Kasm API returns them."""
    return _image_payload
