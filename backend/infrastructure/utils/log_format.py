from __future__ import annotations

import json
from typing import Any

# Credentials never reach the logs.
_REDACTED_KEYS = frozenset({"password", "password_hash", "token", "access_token", "authorization", "secret_key"})
# Comment bodies and list names are user text; keep lines short.
_MAX_TEXT_CHARS = 80


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        # Member sets (likes, collaborators) can grow large; log the size only.
        return f"[{len(value)}]"
    text = str(value)
    if len(text) > _MAX_TEXT_CHARS:
        text = text[: _MAX_TEXT_CHARS - 3] + "..."
    return json.dumps(text, ensure_ascii=False)


def format_kv(**fields: Any) -> str:
    """
    Render one log line as ``key=value`` pairs, skipping ``None`` values.

    Example:
      method="PUT" path="/api/v1/watchlists/x/comments" status=403 error="Unauthorized: ..."
    """
    parts: list[str] = []
    for key, value in fields.items():
        if value is None:
            continue
        rendered = '"***"' if key.lower() in _REDACTED_KEYS else _render(value)
        parts.append(f"{key}={rendered}")
    return " ".join(parts)
