"""
Agent models — docker agents that run session containers.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel

from kasmctl.core.display import format_bytes, format_value, short_id
from kasmctl.core.models.resource import Resource


class Agent(Resource):
    resource_name: ClassVar[str] = "Agent"
    table_headers: ClassVar[tuple[str, ...]] = (
        "AGENT ID",
        "HOSTNAME",
        "STATUS",
        "ENABLED",
        "CORES",
        "MEMORY",
    )

    agent_id: str
    server_id: str | None = None
    hostname: str | None = None
    status: str | None = None
    zone_id: str | None = None
    enabled: bool | None = None
    cores: float | None = None
    memory: int | None = None
    gpus: float | None = None
    cores_override: float | None = None
    memory_override: int | None = None
    gpus_override: float | None = None
    auto_prune_images: str | None = None

    def table_row(self) -> list[str]:
        return [
            short_id(self.agent_id),
            self.hostname or "",
            self.status or "",
            format_value(self.enabled),
            format_value(self.cores),
            format_bytes(self.memory),
        ]

    def table_detail(self) -> list[tuple[str, str]]:
        return [
            ("AGENT ID", self.agent_id),
            ("SERVER ID", self.server_id or ""),
            ("HOSTNAME", self.hostname or ""),
            ("STATUS", self.status or ""),
            ("ZONE ID", self.zone_id or ""),
            ("ENABLED", format_value(self.enabled)),
            ("CORES", format_value(self.cores)),
            ("MEMORY", format_bytes(self.memory)),
            ("GPUS", format_value(self.gpus)),
            ("CORES OVERRIDE", format_value(self.cores_override)),
            ("MEMORY OVERRIDE", format_bytes(self.memory_override)),
            ("GPUS OVERRIDE", format_value(self.gpus_override)),
            ("AUTO PRUNE IMAGES", self.auto_prune_images or ""),
        ]


class UpdateAgentRequest(BaseModel):
    """Body of ``admin/update_agent``.  Only ``agent_id`` is required."""

    agent_id: str
    enabled: bool | None = None
    cores_override: float | None = None
    memory_override: int | None = None
    gpus_override: float | None = None
    auto_prune_images: str | None = None
