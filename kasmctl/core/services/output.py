"""
Output rendering — table / JSON / YAML for resources.

Every renderer returns a string; the CLI decides where it goes.
Tables are drawn with rich into an in-memory console so the output is
plain text (no colour codes) and easy to assert on in tests.
"""

from __future__ import annotations

import io
import json
from enum import Enum
from typing import Any, Sequence

import yaml
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from kasmctl.core.models.config import KasmConfig
from kasmctl.core.models.resource import Resource


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


OUTPUT_CHOICES = [f.value for f in OutputFormat]


def _plural(name: str, count: int) -> str:
    return name if count == 1 else f"{name}s"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Draw a bordered table and return it as text."""
    table = Table(box=box.SQUARE, show_header=True, header_style="bold")
    for header in headers:
        table.add_column(header, no_wrap=True)
    for row in rows:
        # Text cells so values like "[x]" are not read as rich markup.
        table.add_row(*(Text(cell) for cell in row))

    buf = io.StringIO()
    console = Console(file=buf, width=200, no_color=True, highlight=False)
    console.print(table)
    return "\n".join(line.rstrip() for line in buf.getvalue().rstrip().splitlines())


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2)


def dump_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip("\n")


def render_list(
    items: Sequence[Resource],
    fmt: OutputFormat,
    resource_cls: type[Resource],
) -> str:
    """Render a resource listing.

    Tables end with a ``N <resource>[s]`` footer; an empty listing is a
    single ``No <resource>s found.`` line.  JSON and YAML render the
    full objects (an empty list stays an empty list).
    """
    if fmt is OutputFormat.JSON:
        return dump_json([item.to_output() for item in items])
    if fmt is OutputFormat.YAML:
        return dump_yaml([item.to_output() for item in items])

    noun = resource_cls.resource_name.lower()
    if not items:
        return f"No {noun}s found."
    table = render_table(resource_cls.table_headers, [item.table_row() for item in items])
    return f"{table}\n{len(items)} {_plural(noun, len(items))}"


def render_one(item: Resource, fmt: OutputFormat) -> str:
    """Render a single resource: a FIELD/VALUE table, or the full object."""
    if fmt is OutputFormat.JSON:
        return dump_json(item.to_output())
    if fmt is OutputFormat.YAML:
        return dump_yaml(item.to_output())
    return render_table(("FIELD", "VALUE"), item.table_detail())


def render_contexts(config: KasmConfig) -> str:
    """Table of configured contexts; the current one is marked ``*``."""
    if not config.contexts:
        return "No contexts configured."
    rows = [
        ["*" if ctx.name == config.current_context else "", ctx.name, ctx.server]
        for ctx in config.contexts
    ]
    return render_table(("", "NAME", "SERVER"), rows)
