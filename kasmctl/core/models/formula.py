"""
Formula model — the packaging manifest for the prebuilt kasmctl binary.

A formula maps (os, arch) variants to a download URL and a checksum,
names the single file to install, and declares the smoke test run after
installation.  Loaded from ``kasmctl/core/data/formula.yml``.
"""

from __future__ import annotations

import re
import string
from typing import Literal

from pydantic import BaseModel, Field, field_validator

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")
_URL_FIELDS = frozenset({"version", "os", "arch"})


class SmokeTest(BaseModel):
    """Post-install check: run the binary, expect a substring in its output."""

    args: list[str] = Field(default_factory=lambda: ["--help"])
    expect: str = "kasmctl"


class Variant(BaseModel):
    """One (os, arch) build of the binary."""

    os: Literal["darwin", "linux"]
    arch: Literal["amd64", "arm64"]
    sha256: str = ""
    url: str | None = None

    @field_validator("os", "arch", mode="before")
    @classmethod
    def _lower(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def key(self) -> str:
        return f"{self.os}-{self.arch}"

    @property
    def has_valid_checksum(self) -> bool:
        """True when ``sha256`` looks like a real hex digest."""
        return bool(_SHA256_RE.match(self.sha256.strip().lower()))


class Formula(BaseModel):
    """A packaging manifest for one released version."""

    name: str
    desc: str = ""
    homepage: str = ""
    version: str
    license: str = ""
    url_template: str
    binary: str = ""
    test: SmokeTest = Field(default_factory=SmokeTest)
    variants: list[Variant] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _strip_v(cls, value: str) -> str:
        # Tags are "v0.1.0"; the manifest stores the bare version.
        value = value.strip()
        return value[1:] if value.startswith("v") else value

    @field_validator("url_template")
    @classmethod
    def _known_placeholders(cls, value: str) -> str:
        fields = {name for _, name, _, _ in string.Formatter().parse(value) if name is not None}
        unknown = sorted(fields - _URL_FIELDS)
        if unknown:
            raise ValueError(
                f"unknown placeholder(s) {unknown}; use {{version}}, {{os}} and {{arch}}"
            )
        return value

    @property
    def binary_name(self) -> str:
        return self.binary or self.name

    def url_for(self, variant: Variant) -> str:
        """Effective download URL for a variant."""
        if variant.url:
            return variant.url
        return self.url_template.format(version=self.version, os=variant.os, arch=variant.arch)

    def asset_name(self, variant: Variant) -> str:
        """File name of the release archive for a variant."""
        return self.url_for(variant).rstrip("/").rsplit("/", 1)[-1]

    def get_variant(self, os_name: str, arch: str) -> Variant | None:
        """Look up the variant for an os/arch pair."""
        os_name, arch = os_name.lower(), arch.lower()
        for variant in self.variants:
            if variant.os == os_name and variant.arch == arch:
                return variant
        return None

    def platforms(self) -> list[str]:
        return [v.key for v in self.variants]
