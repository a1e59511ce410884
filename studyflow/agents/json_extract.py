# studyflow/agents/json_extract.py
"""
Recover a JSON payload from model text that may mix prose and data.

Fallback chain:
1. fenced block (```json ... ``` or ``` ... ```): parse only the fence body
2. no fence: parse the whole trimmed text
3. whole text is not JSON: parse the first balanced { ... } object

Every dead end raises MalformedModelOutput with the raw text attached.
"""
import json
import re
from typing import Any

from studyflow.errors import MalformedModelOutput

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def find_fenced_block(text: str) -> str | None:
    match = _FENCE_RE.search(text)
    return match.group(1) if match else None


def _extract_first_json_object(text: str) -> str | None:
    """
    Extract the first complete top-level JSON object using brace counting.
    Braces inside string literals are ignored.
    """
    start = text.find("{")
    if start == -1:
        return None

    brace_count = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            brace_count += 1
        elif ch == "}":
            brace_count -= 1
            if brace_count == 0:
                return text[start:i + 1]

    return None


def extract_json_payload(text: str) -> Any:
    raw = (text or "").strip()

    fenced = find_fenced_block(raw)
    if fenced is not None:
        try:
            return json.loads(fenced)
        except json.JSONDecodeError as e:
            raise MalformedModelOutput(f"Fenced JSON block did not parse: {e}", raw_text=raw) from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        last_err = e

    embedded = _extract_first_json_object(raw)
    if embedded is not None:
        try:
            return json.loads(embedded)
        except json.JSONDecodeError as e:
            last_err = e

    raise MalformedModelOutput(f"No JSON payload found in model output: {last_err}", raw_text=raw)
