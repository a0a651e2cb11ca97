"""YAML I/O for saved transcripts."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import yaml

from weavex.models.messages import MESSAGE_LIST_ADAPTER, Message


def load_yaml(path: Path) -> Any:
    """Load a YAML file and return the parsed data."""
    with open(path) as f:
        return yaml.safe_load(f)


def save_yaml(data: Any, path: Path) -> None:
    """Save data as YAML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def dump_transcript(messages: Iterable[Message]) -> list[dict[str, Any]]:
    """Plain-data form of a transcript; unset optional fields are dropped."""
    return [m.model_dump(mode="json", exclude_none=True) for m in messages]


def save_transcript(messages: Iterable[Message], path: Path, session_id: str | None = None) -> None:
    data: dict[str, Any] = {}
    if session_id is not None:
        data["session_id"] = session_id
    data["messages"] = dump_transcript(messages)
    save_yaml(data, path)


def load_transcript(path: Path) -> list[Message]:
    """Load messages written by ``save_transcript``.

    Raises:
        ValueError: If the file does not hold a transcript.
    """
    data = load_yaml(path)
    if not isinstance(data, dict) or "messages" not in data:
        raise ValueError(f"No transcript found in {path}")
    return MESSAGE_LIST_ADAPTER.validate_python(data["messages"])
