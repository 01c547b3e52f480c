"""
Config models — named connection contexts stored in config.yaml.

The on-disk format uses kebab-case keys and a flat list of contexts::

    current-context: prod
    contexts:
      - name: prod
        server: https://kasm.example.com
        api-key: abc
        api-secret: def
        insecure-skip-tls-verify: true   # omitted when false
        timeout-seconds: 60              # omitted when unset
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Context(BaseModel):
    """Server URL and API credentials for one Kasm deployment."""

    model_config = ConfigDict(populate_by_name=True)

    server: str
    api_key: str = Field(alias="api-key")
    api_secret: str = Field(alias="api-secret")
    insecure_skip_tls_verify: bool = Field(default=False, alias="insecure-skip-tls-verify")
    timeout_seconds: int | None = Field(default=None, alias="timeout-seconds", ge=1)

    def to_yaml_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not self.insecure_skip_tls_verify:
            data.pop("insecure-skip-tls-verify", None)
        return data


class NamedContext(Context):
    """A context plus the name it is stored under.

    The context fields sit next to ``name`` rather than under a nested
    ``context:`` key.
    """

    name: str

    @property
    def context(self) -> Context:
        return Context.model_validate(self.model_dump(exclude={"name"}))

    def to_yaml_dict(self) -> dict[str, Any]:
        return {"name": self.name, **super().to_yaml_dict()}


class KasmConfig(BaseModel):
    """The whole config file."""

    model_config = ConfigDict(populate_by_name=True)

    current_context: str | None = Field(default=None, alias="current-context")
    contexts: list[NamedContext] = Field(default_factory=list)

    def get_context(self, name: str) -> NamedContext | None:
        """Look up a context by name."""
        for ctx in self.contexts:
            if ctx.name == name:
                return ctx
        return None

    def set_context(self, name: str, context: Context) -> None:
        """Insert or replace a context.  The first context becomes current."""
        entry = NamedContext(name=name, **context.model_dump())
        for i, existing in enumerate(self.contexts):
            if existing.name == name:
                self.contexts[i] = entry
                break
        else:
            self.contexts.append(entry)

        if self.current_context is None:
            self.current_context = name

    def to_yaml_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.current_context is not None:
            data["current-context"] = self.current_context
        data["contexts"] = [c.to_yaml_dict() for c in self.contexts]
        return data
