"""
Decoding helpers for structured (JSON) provider output.
"""

import json
import re
from typing import Any, Type, TypeVar

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from bookcast.utils.errors import ResponseDecodeError

T = TypeVar("T")

# One fenced block around the whole payload, optional language tag
_CODE_FENCE = re.compile(r"^```[\w+-]*[ \t]*\r?\n?(.*?)\r?\n?[ \t]*```$", re.DOTALL)

_log = logger.bind(name="ResponseParser")


def strip_code_fence(text: str) -> str:
    """Remove a single leading/trailing ``` wrapper if the text has one."""
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def extract_json_from_text(text: str) -> Any:
    """
    Parse provider text as JSON.

    Raises:
        ResponseDecodeError: on empty text or when the text is not JSON
    """
    if text is None or not text.strip():
        raise ResponseDecodeError("the AI returned an empty response", raw_text=text or "")

    cleaned = strip_code_fence(text)
    if not cleaned:
        raise ResponseDecodeError("the AI returned an empty code block", raw_text=text)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        _log.warning(f"Failed to parse JSON from AI response: {e}. Raw text: {text!r}")
        raise ResponseDecodeError(str(e), raw_text=text) from e


def decode_response(text: str, schema: Type[T]) -> T:
    """Parse ``text`` as JSON and validate it against ``schema``."""
    data = extract_json_from_text(text)
    try:
        return TypeAdapter(schema).validate_python(data)
    except ValidationError as e:
        message = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        _log.warning(f"AI response does not match the expected shape: {message}. Raw text: {text!r}")
        raise ResponseDecodeError(message, raw_text=text) from e
