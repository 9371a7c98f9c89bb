"""Utility helpers for the CinemAI service."""

from __future__ import annotations

import json
import re
from typing import Any


JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*([\[{].*?[\]}])\s*```", re.DOTALL)
BARE_JSON_RE = re.compile(r"[\[{].*[\]}]", re.DOTALL)


def extract_json_payload(content: str) -> Any:
    """Extract and parse the first JSON object or array from the model response."""

    stripped = content.strip()
    if stripped.startswith(("{", "[")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    match = JSON_BLOCK_RE.search(content)
    if match:
        payload = match.group(1)
    else:
        match = BARE_JSON_RE.search(content)
        if not match:
            raise ValueError("No JSON payload found in response")
        payload = match.group(0)

    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON payload produced by the model") from exc


def unwrap_items(parsed: Any, *keys: str) -> list[dict[str, Any]]:
    """Return the list of object entries from a bare array or a keyed object."""

    candidate: Any = parsed
    if isinstance(parsed, dict):
        candidate = None
        for key in keys:
            if isinstance(parsed.get(key), list):
                candidate = parsed[key]
                break
    if not isinstance(candidate, list):
        return []
    return [entry for entry in candidate if isinstance(entry, dict)]
