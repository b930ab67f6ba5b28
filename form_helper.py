"""Minimal HTML builders for the generated payment forms."""

from __future__ import annotations

from html import escape
from typing import Any, Mapping


def _attributes(attributes: Mapping[str, Any] | None) -> str:
    if not attributes:
        return ""
    return "".join(
        f' {escape(str(k))}="{escape(str(v))}"' for k, v in attributes.items() if v is not None
    )


def tag(name: str, attributes: Mapping[str, Any] | None = None) -> str:
    """Render a self-closing element, e.g. ``<input ... />``."""
    return f"<{name}{_attributes(attributes)} />"


def content_tag(name: str, content: str, attributes: Mapping[str, Any] | None = None) -> str:
    # content is already rendered markup and is not escaped
    return f"<{name}{_attributes(attributes)}>{content}</{name}>"
