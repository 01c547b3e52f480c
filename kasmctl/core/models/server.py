"""
Server models — fixed (non-agent) servers that host sessions.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel

from kasmctl.core.display import format_value, short_id
from kasmctl.core.models.resource import Resource


class Server(Resource):
    resource_name: ClassVar[str] = "Server"
    table_headers: ClassVar[tuple[str, ...]] = (
        "SERVER ID",
        "NAME",
        "HOSTNAME",
        "TYPE",
        "ENABLED",
        "SESSIONS",
    )

    server_id: str
    friendly_name: str | None = None
    hostname: str | None = None
    enabled: bool | None = None
    connection_type: str | None = None
    connection_port: int | None = None
    connection_username: str | None = None
    connection_info: str | None = None
    max_simultaneous_sessions: int | None = None
    max_simultaneous_users: int | None = None
    zone_id: str | None = None
    pool_id: str | None = None

    def table_row(self) -> list[str]:
        return [
            short_id(self.server_id),
            self.friendly_name or "",
            self.hostname or "",
            self.connection_type or "",
            format_value(self.enabled),
            format_value(self.max_simultaneous_sessions),
        ]

    def table_detail(self) -> list[tuple[str, str]]:
        return [
            ("SERVER ID", self.server_id),
            ("FRIENDLY NAME", self.friendly_name or ""),
            ("HOSTNAME", self.hostname or ""),
            ("ENABLED", format_value(self.enabled)),
            ("CONNECTION TYPE", self.connection_type or ""),
            ("CONNECTION PORT", format_value(self.connection_port)),
            ("CONNECTION USERNAME", self.connection_username or ""),
            ("CONNECTION INFO", self.connection_info or ""),
            ("MAX SIMULTANEOUS SESSIONS", format_value(self.max_simultaneous_sessions)),
            ("MAX SIMULTANEOUS USERS", format_value(self.max_simultaneous_users)),
            ("ZONE ID", self.zone_id or ""),
            ("POOL ID", self.pool_id or ""),
        ]


class CreateServerParams(BaseModel):
    """Body of ``admin/create_server`` (sent under ``target_server``)."""

    friendly_name: str
    hostname: str
    connection_type: str
    connection_port: int
    zone_id: str
    enabled: bool = True
    connection_username: str | None = None
    connection_info: str | None = None
    max_simultaneous_sessions: int | None = None
    max_simultaneous_users: int | None = None
    pool_id: str | None = None


class UpdateServerRequest(BaseModel):
    """Body of ``admin/update_server``.  Only ``server_id`` is required."""

    server_id: str
    friendly_name: str | None = None
    hostname: str | None = None
    enabled: bool | None = None
    connection_type: str | None = None
    connection_port: int | None = None
    connection_username: str | None = None
    connection_info: str | None = None
    max_simultaneous_sessions: int | None = None
    max_simultaneous_users: int | None = None
    zone_id: str | None = None
    pool_id: str | None = None
