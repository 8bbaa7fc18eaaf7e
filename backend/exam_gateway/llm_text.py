from __future__ import annotations
import json
import re
from typing import Any

from .errors import ExternalCallFailure


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around the whole reply, if any."""
    stripped = (text or "").strip()
    if len(stripped) >= 6 and stripped.startswith("```") and stripped.endswith("```"):
        inner = stripped[3:-3]
        first_line, sep, rest = inner.partition("\n")
        # Drop a language hint such as ```json or ```text
        if sep and re.fullmatch(r"[\w-]*", first_line.strip()):
            inner = rest
        return inner.strip()
    return stripped


def extract_json(text: str) -> Any:
    try:
        return json.loads(text)
    except Exception:
        pass
    code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
    if code_block:
        candidate = code_block.group(1)
        try:
            return json.loads(candidate)
        except Exception:
            pass
    # Try the outermost object or array, whichever opens first
    spans = []
    for open_ch, close_ch in (("{", "}"), ("[", "]")):
        first = text.find(open_ch)
        last = text.rfind(close_ch)
        if first != -1 and last > first:
            spans.append((first, last))
    for first, last in sorted(spans):
        try:
            return json.loads(text[first : last + 1])
        except Exception:
            pass
    raise ExternalCallFailure("LLM did not return valid JSON.")
