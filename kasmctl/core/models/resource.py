"""
Resource base — the contract every renderable Kasm object follows.

A resource knows its display name, the compact columns used in list
tables, and the full label/value pairs used in the single-item view.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


class Resource(BaseModel):
    """Base class for Kasm API objects that the CLI can render."""

    # The API adds fields between releases; ignore what we don't model.
    model_config = ConfigDict(extra="ignore")

    resource_name: ClassVar[str] = "Resource"
    table_headers: ClassVar[tuple[str, ...]] = ()

    def table_row(self) -> list[str]:
        raise NotImplementedError

    def table_detail(self) -> list[tuple[str, str]]:
        """Label/value pairs for the detailed single-resource view.

        Defaults to pairing ``table_headers`` with ``table_row()``.
        """
        return list(zip(self.table_headers, self.table_row()))

    def to_output(self) -> dict[str, Any]:
        """JSON-safe dict used by the JSON and YAML renderers."""
        return self.model_dump(mode="json")
