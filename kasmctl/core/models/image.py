"""
Image models — workspace images and the create / update request bodies.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel

from kasmctl.core.display import format_bytes, format_value, short_id
from kasmctl.core.models.resource import Resource


class Image(Resource):
    """A workspace image that sessions are launched from."""

    resource_name: ClassVar[str] = "Image"
    table_headers: ClassVar[tuple[str, ...]] = (
        "IMAGE ID",
        "NAME",
        "DOCKER IMAGE",
        "ENABLED",
        "CORES",
        "MEMORY",
    )

    image_id: str
    friendly_name: str | None = None
    name: str | None = None
    description: str | None = None
    enabled: bool | None = None
    cores: float | None = None
    memory: int | None = None
    image_src: str | None = None

    def table_row(self) -> list[str]:
        return [
            short_id(self.image_id),
            self.friendly_name or "",
            self.name or "",
            format_value(self.enabled),
            format_value(self.cores),
            format_bytes(self.memory),
        ]

    def table_detail(self) -> list[tuple[str, str]]:
        return [
            ("IMAGE ID", self.image_id),
            ("FRIENDLY NAME", self.friendly_name or ""),
            ("DOCKER IMAGE", self.name or ""),
            ("DESCRIPTION", self.description or ""),
            ("ENABLED", format_value(self.enabled)),
            ("CORES", format_value(self.cores)),
            ("MEMORY", format_bytes(self.memory)),
            ("IMAGE SRC", self.image_src or ""),
        ]


class CreateImageParams(BaseModel):
    """Body of ``admin/create_image`` (sent under ``target_image``)."""

    name: str
    friendly_name: str
    description: str | None = None
    cores: float | None = None
    memory: int | None = None
    enabled: bool = True
    image_src: str = "Container"
    docker_registry: str | None = None
    run_config: str | None = None
    exec_config: str | None = None
    image_type: str | None = None


class UpdateImageRequest(BaseModel):
    """Body of ``admin/update_image``.  Only ``image_id`` is required."""

    image_id: str
    name: str | None = None
    friendly_name: str | None = None
    description: str | None = None
    cores: float | None = None
    memory: int | None = None
    enabled: bool | None = None
    image_src: str | None = None
    docker_registry: str | None = None
    run_config: str | None = None
    exec_config: str | None = None
    hidden: bool | None = None
