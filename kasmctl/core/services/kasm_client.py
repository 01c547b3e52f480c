"""
Kasm API client — JSON-over-POST calls to a Kasm Workspaces server.

Every endpoint is ``POST <server>/api/<path>`` with a JSON object body.
The API key and secret are injected into each body.  The server reports
failures either with a non-2xx status or with an ``error_message`` field
in an otherwise normal (often HTTP 200) response; both become
``ServerError``.
"""

from __future__ import annotations

import http.client
import json
import logging
import ssl
import urllib.error
import urllib.request
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from kasmctl import __version__
from kasmctl.core.models.agent import Agent, UpdateAgentRequest
from kasmctl.core.models.config import Context
from kasmctl.core.models.image import CreateImageParams, Image, UpdateImageRequest
from kasmctl.core.models.server import CreateServerParams, Server, UpdateServerRequest
from kasmctl.core.models.session import CreateSessionResponse, Session
from kasmctl.core.models.zone import Zone

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECS = 30

M = TypeVar("M", bound=BaseModel)


# ── Errors ──────────────────────────────────────────────────────


class ApiError(Exception):
    """Base class for Kasm API failures."""


class ServerError(ApiError):
    """The server answered with an error status or ``error_message``."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"API error ({status}): {message}")
        self.status = status
        self.message = message


class KasmConnectionError(ApiError):
    """The request never got a response (DNS, TLS, refused, timeout)."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Connection error: {detail}")


class DeserializationError(ApiError):
    """The response body was not the JSON we expected."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to parse response: {detail}")


# ── Client ──────────────────────────────────────────────────────


class KasmClient:
    """Thin typed wrapper over the Kasm developer API."""

    def __init__(self, context: Context) -> None:
        self.base_url = context.server.rstrip("/")
        self.timeout = context.timeout_seconds or DEFAULT_TIMEOUT_SECS
        self._api_key = context.api_key
        self._api_secret = context.api_secret
        self._ssl_context: ssl.SSLContext | None = None
        if context.insecure_skip_tls_verify:
            self._ssl_context = ssl.create_default_context()
            self._ssl_context.check_hostname = False
            self._ssl_context.verify_mode = ssl.CERT_NONE

    def __repr__(self) -> str:
        return f"KasmClient(base_url={self.base_url!r})"

    def post(self, path: str, body: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST ``body`` to ``/api/<path>`` and return the decoded JSON object.

        ``path`` is relative to ``/api/``, e.g. ``"public/get_kasms"`` or
        ``"stop_kasm"``.

        Raises:
            ServerError: ``error_message`` in the body, or non-2xx status.
            KasmConnectionError: Transport failure.
            DeserializationError: Body is not a JSON object.
        """
        payload = dict(body or {})
        payload["api_key"] = self._api_key
        payload["api_key_secret"] = self._api_secret

        url = f"{self.base_url}/api/{path}"
        logger.debug("POST %s %s", url, json.dumps(payload))
        try:
            req = urllib.request.Request(
                url,
                data=json.dumps(payload).encode("utf-8"),
                method="POST",
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": f"kasmctl/{__version__}",
                },
            )
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as resp:
                status = resp.status
                raw = resp.read()
        except urllib.error.HTTPError as e:
            # Non-2xx still carries a body worth inspecting.
            status = e.code
            raw = e.read()
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
            reason = getattr(e, "reason", e)
            raise KasmConnectionError(str(reason)) from e

        text = raw.decode("utf-8", errors="replace")
        logger.debug("POST %s → %d (%d bytes)", path, status, len(raw))

        try:
            data = json.loads(text)
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("error_message") is not None:
            raise ServerError(status, str(data["error_message"]))

        if not 200 <= status < 300:
            raise ServerError(status, f"HTTP {status}")

        if data is None:
            raise DeserializationError(f"expected JSON, got {text[:80]!r}")
        if not isinstance(data, dict):
            raise DeserializationError(f"expected a JSON object, got {type(data).__name__}")
        return data

    def _field(self, data: dict[str, Any], key: str) -> Any:
        if key not in data:
            raise DeserializationError(f"missing field {key!r}")
        return data[key]

    def _parse(self, model: type[M], value: Any) -> M:
        try:
            return model.model_validate(value)
        except ValidationError as e:
            raise DeserializationError(str(e)) from e

    def _parse_list(self, model: type[M], data: dict[str, Any], key: str) -> list[M]:
        items = self._field(data, key)
        if not isinstance(items, list):
            raise DeserializationError(f"field {key!r} is not a list")
        return [self._parse(model, item) for item in items]

    # ── Sessions ────────────────────────────────────────────────

    def get_kasms(self) -> list[Session]:
        return self._parse_list(Session, self.post("public/get_kasms"), "kasms")

    def get_kasm_status(self, kasm_id: str, user_id: str | None = None) -> Session:
        body: dict[str, Any] = {"kasm_id": kasm_id}
        if user_id is not None:
            body["user_id"] = user_id
        data = self.post("public/get_kasm_status", body)
        return self._parse(Session, self._field(data, "kasm"))

    def request_kasm(self, image_id: str, user_id: str | None = None) -> CreateSessionResponse:
        body: dict[str, Any] = {"image_id": image_id}
        if user_id is not None:
            body["user_id"] = user_id
        return self._parse(CreateSessionResponse, self.post("public/request_kasm", body))

    def destroy_kasm(self, kasm_id: str) -> None:
        self.post("public/destroy_kasm", {"kasm_id": kasm_id})

    def stop_kasm(self, kasm_id: str) -> None:
        self.post("stop_kasm", {"kasm_id": kasm_id})

    def pause_kasm(self, kasm_id: str) -> None:
        self.post("pause_kasm", {"kasm_id": kasm_id})

    def resume_kasm(self, kasm_id: str) -> None:
        self.post("resume_kasm", {"kasm_id": kasm_id})

    # ── Images ──────────────────────────────────────────────────

    def get_images(self) -> list[Image]:
        return self._parse_list(Image, self.post("public/get_images"), "images")

    def create_image(self, params: CreateImageParams) -> Image:
        data = self.post(
            "admin/create_image",
            {"target_image": params.model_dump(exclude_none=True)},
        )
        return self._parse(Image, self._field(data, "image"))

    def update_image(self, request: UpdateImageRequest) -> Image:
        data = self.post(
            "admin/update_image",
            {"target_image": request.model_dump(exclude_none=True)},
        )
        return self._parse(Image, self._field(data, "image"))

    def delete_image(self, image_id: str) -> None:
        self.post("admin/delete_image", {"target_image": {"image_id": image_id}})

    # ── Servers ─────────────────────────────────────────────────

    def get_servers(self) -> list[Server]:
        return self._parse_list(Server, self.post("admin/get_servers"), "servers")

    def create_server(self, params: CreateServerParams) -> Server:
        data = self.post(
            "admin/create_server",
            {"target_server": params.model_dump(exclude_none=True)},
        )
        return self._parse(Server, self._field(data, "server"))

    def update_server(self, request: UpdateServerRequest) -> Server:
        data = self.post(
            "admin/update_server",
            {"target_server": request.model_dump(exclude_none=True)},
        )
        return self._parse(Server, self._field(data, "server"))

    def delete_server(self, server_id: str) -> None:
        self.post("admin/delete_server", {"target_server": {"server_id": server_id}})

    # ── Agents ──────────────────────────────────────────────────

    def get_agents(self) -> list[Agent]:
        return self._parse_list(Agent, self.post("admin/get_agents"), "agents")

    def update_agent(self, request: UpdateAgentRequest) -> Agent:
        data = self.post(
            "admin/update_agent",
            {"target_agent": request.model_dump(exclude_none=True)},
        )
        return self._parse(Agent, self._field(data, "agent"))

    # ── Zones ───────────────────────────────────────────────────

    def get_zones(self) -> list[Zone]:
        return self._parse_list(Zone, self.post("public/get_zones"), "zones")
