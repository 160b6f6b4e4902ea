"""Text rendering helpers shared by the n8n tools."""

import json
from typing import Any

ERROR_PREFIXES = ("Error", "Failed to")


def flag(value: Any) -> str:
    """Render a remote boolean the way n8n shows it (``true``/``false``)."""
    return "true" if value else "false"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def json_block(data: Any) -> str:
    return f"```json\n{to_json(data)}\n```"


def truncate(text: str, length: int) -> str:
    return text[:length] + ("..." if len(text) > length else "")


def tag_names(tags: Any) -> str:
    """Tags arrive as strings or ``{"id", "name"}`` objects."""
    if not isinstance(tags, list) or not tags:
        return "No tags"
    return ", ".join(
        str(tag.get("name") or tag.get("id")) if isinstance(tag, dict) else str(tag)
        for tag in tags
    )


def items_of(data: Any) -> list[Any]:
    """Object items of a ``{"data": [...]}`` payload or a bare list."""
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def is_error_text(text: str) -> bool:
    return text.startswith(ERROR_PREFIXES)
