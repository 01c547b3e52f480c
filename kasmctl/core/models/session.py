"""
Session models — Kasm sessions ("kasms") and the create-session response.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from kasmctl.core.display import relative_age, short_id
from kasmctl.core.models.resource import Resource


class SessionImage(BaseModel):
    """Nested image metadata returned alongside a session."""

    model_config = ConfigDict(extra="ignore")

    friendly_name: str | None = None
    name: str | None = None

    @property
    def display_name(self) -> str | None:
        return self.friendly_name if self.friendly_name is not None else self.name


class Session(Resource):
    """A running (or paused / stopped) workspace container."""

    resource_name: ClassVar[str] = "Session"
    table_headers: ClassVar[tuple[str, ...]] = ("KASM ID", "STATUS", "IMAGE", "USER", "AGE")

    kasm_id: str
    user_id: str | None = None
    image_id: str | None = None
    image: SessionImage | None = None
    username: str | None = None
    share_id: str | None = None
    kasm_url: str | None = None
    created_date: str | None = None
    expiration_date: str | None = None
    hostname: str | None = None
    server_id: str | None = None
    keepalive_date: str | None = None
    start_date: str | None = None
    operational_status: str | None = None
    container_id: str | None = None

    def table_row(self) -> list[str]:
        image_display = self.image.display_name if self.image else None
        if image_display is None:
            image_display = self.image_id
        return [
            short_id(self.kasm_id),
            self.operational_status or "",
            image_display or "",
            self.username or "",
            relative_age(self.created_date) if self.created_date else "",
        ]

    def table_detail(self) -> list[tuple[str, str]]:
        image_friendly = self.image.display_name if self.image else None
        return [
            ("KASM ID", self.kasm_id),
            ("STATUS", self.operational_status or ""),
            ("IMAGE", image_friendly or ""),
            ("IMAGE ID", self.image_id or ""),
            ("USERNAME", self.username or ""),
            ("USER ID", self.user_id or ""),
            ("HOSTNAME", self.hostname or ""),
            ("SERVER ID", self.server_id or ""),
            ("CONTAINER ID", self.container_id or ""),
            ("SHARE ID", self.share_id or ""),
            ("KASM URL", self.kasm_url or ""),
            ("STARTED", self.start_date or ""),
            ("KEEPALIVE", self.keepalive_date or ""),
            ("CREATED", self.created_date or ""),
            ("EXPIRES", self.expiration_date or ""),
        ]


class CreateSessionResponse(BaseModel):
    """Response from ``request_kasm``.

    ``session_token`` is a credential: it is kept out of serialized
    output and out of ``repr``.
    """

    model_config = ConfigDict(extra="ignore")

    kasm_id: str
    status: str | None = None
    kasm_url: str | None = None
    session_token: str | None = Field(default=None, exclude=True, repr=False)
    share_id: str | None = None
    user_id: str | None = None
    username: str | None = None

    def to_output(self) -> dict:
        return self.model_dump(mode="json")
