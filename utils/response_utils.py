"""Utilities for parsing GHL response bodies that are not clean JSON.

`robust_parse_text` handles:
- Normal JSON (json.loads)
- NDJSON (newline-delimited JSON, returns list or single object)
- Text with a leading JSON value followed by extra data (json.JSONDecoder().raw_decode)
- Anything else is returned as the original text
"""
from __future__ import annotations

import json
from typing import Any


def robust_parse_text(text: str) -> Any:
    """Parse `text` as JSON, then NDJSON, then the first embedded JSON value, else return it unchanged."""
    if not text or not text.strip():
        return {}

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # NDJSON: every non-empty line must parse
    try:
        objs = [json.loads(ln) for ln in text.splitlines() if ln.strip()]
        if objs:
            return objs if len(objs) > 1 else objs[0]
    except json.JSONDecodeError:
        pass

    try:
        obj, _ = json.JSONDecoder().raw_decode(text.lstrip())
        return obj
    except json.JSONDecodeError:
        pass

    return text
