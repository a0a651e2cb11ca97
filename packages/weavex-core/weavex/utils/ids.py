"""Identifier generation."""

from __future__ import annotations

import uuid


def generate_session_id() -> str:
    """Generate a unique agent session ID."""
    return str(uuid.uuid4())


def fallback_call_id(index: int) -> str:
    """ID for a tool call the server sent without one (Ollama's native API)."""
    return f"call_{index}"
