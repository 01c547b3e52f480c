"""
Zone model — deployment zones (load balancing and proxy settings).
"""

from __future__ import annotations

from typing import ClassVar

from kasmctl.core.display import format_value, short_id
from kasmctl.core.models.resource import Resource


class Zone(Resource):
    resource_name: ClassVar[str] = "Zone"
    table_headers: ClassVar[tuple[str, ...]] = ("ZONE ID", "NAME", "LOAD BALANCING", "PROXY")

    zone_id: str
    zone_name: str | None = None
    allow_origin_domain: str | None = None
    upstream_auth_address: str | None = None
    load_balancing_strategy: str | None = None
    search_alternate_zones: bool | None = None
    prioritize_static_agents: bool | None = None
    proxy_connections: bool | None = None
    proxy_hostname: str | None = None
    proxy_path: str | None = None
    proxy_port: int | None = None

    def table_row(self) -> list[str]:
        return [
            short_id(self.zone_id),
            self.zone_name or "",
            self.load_balancing_strategy or "",
            format_value(self.proxy_connections),
        ]

    def table_detail(self) -> list[tuple[str, str]]:
        return [
            ("ZONE ID", self.zone_id),
            ("ZONE NAME", self.zone_name or ""),
            ("ALLOW ORIGIN DOMAIN", self.allow_origin_domain or ""),
            ("UPSTREAM AUTH ADDRESS", self.upstream_auth_address or ""),
            ("LOAD BALANCING STRATEGY", self.load_balancing_strategy or ""),
            ("SEARCH ALTERNATE ZONES", format_value(self.search_alternate_zones)),
            ("PRIORITIZE STATIC AGENTS", format_value(self.prioritize_static_agents)),
            ("PROXY CONNECTIONS", format_value(self.proxy_connections)),
            ("PROXY HOSTNAME", self.proxy_hostname or ""),
            ("PROXY PATH", self.proxy_path or ""),
            ("PROXY PORT", format_value(self.proxy_port)),
        ]
