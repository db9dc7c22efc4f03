from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Sequence

_FENCED_OBJECT = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
_EMBEDDED_OBJECT = re.compile(r"(\{[\s\S]*\})")


def dump_list(values: Sequence[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def load_json_list(raw: Optional[str]) -> List[Any]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if isinstance(data, list):
        return data
    return []


def load_string_list(raw: Optional[str]) -> List[str]:
    values = load_json_list(raw)
    return [str(value) for value in values]


def format_steps(raw: Optional[str]) -> str:
    """Render stored steps as numbered plain text.

    Steps that already carry their own numbering ("1. Open ...") are kept as-is.
    Values that are not a JSON list are returned untouched.
    """
    if not raw:
        return ""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if not isinstance(data, list):
        return raw

    lines: List[str] = []
    for index, step in enumerate(data, start=1):
        text = str(step).strip()
        if not text:
            continue
        if re.match(r"^\d+[.)]\s", text):
            lines.append(text)
        else:
            lines.append(f"{index}. {text}")
    return "\n".join(lines)


def extract_json_object(text: str) -> Any:
    """Parse a JSON object out of free-form model output.

    Tries the whole text first, then a fenced ```json block, then the widest
    brace-delimited span. Raises ``json.JSONDecodeError`` when nothing parses.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as direct_error:
        match = _FENCED_OBJECT.search(text) or _EMBEDDED_OBJECT.search(text)
        if match is None:
            raise direct_error
        return json.loads(match.group(1))
