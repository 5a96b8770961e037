import json
from typing import List

import pytest

from bookcast.core.models import OutlineItemPayload, SEOPayload
from bookcast.utils.errors import ResponseDecodeError
from bookcast.utils.response_parser import decode_response, extract_json_from_text, strip_code_fence

OUTLINE_JSON = json.dumps([
    {"title": "Hook", "focus": "Grab attention", "actions": ["Ask a question", "Tease the ending"]},
    {"title": "Intro", "focus": "Narrator POV", "actions": ["Why this book"]},
])


@pytest.mark.parametrize("wrapped", [
    f"```json\n{OUTLINE_JSON}\n```",
    f"```\n{OUTLINE_JSON}\n```",
    f"  ```JSON\r\n{OUTLINE_JSON}\r\n```  \n",
    f"```json {OUTLINE_JSON}```",
])
def test_fenced_payload_decodes_like_bare_payload(wrapped: str) -> None:
    assert extract_json_from_text(wrapped) == extract_json_from_text(OUTLINE_JSON)


def test_strip_code_fence_leaves_unfenced_text_alone() -> None:
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


def test_strip_code_fence_removes_only_one_wrapper() -> None:
    inner = '"```not a fence```"'
    assert strip_code_fence(f"```json\n{inner}\n```") == inner


@pytest.mark.parametrize("blank", ["", "   ", "\n\t\n", None])
def test_blank_text_is_rejected_before_parsing(blank) -> None:
    with pytest.raises(ResponseDecodeError) as excinfo:
        extract_json_from_text(blank)

    assert "empty" in excinfo.value.parser_message


def test_empty_code_block_is_rejected() -> None:
    with pytest.raises(ResponseDecodeError):
        extract_json_from_text("```json\n```")


def test_invalid_json_keeps_parser_message_and_raw_text() -> None:
    raw = '{"titles": ["a", }'

    with pytest.raises(ResponseDecodeError) as excinfo:
        extract_json_from_text(raw)

    error = excinfo.value
    assert error.raw_text == raw
    assert error.parser_message
    assert error.parser_message in str(error)
    assert raw not in str(error)


def test_decode_response_validates_schema() -> None:
    items = decode_response(OUTLINE_JSON, List[OutlineItemPayload])

    assert [item.title for item in items] == ["Hook", "Intro"]
    assert items[0].actions == ["Ask a question", "Tease the ending"]


def test_decode_response_rejects_missing_required_field() -> None:
    payload = json.dumps({"titles": ["t"], "hashtags": [], "keywords": []})

    with pytest.raises(ResponseDecodeError) as excinfo:
        decode_response(payload, SEOPayload)

    assert "description" in excinfo.value.parser_message


def test_decode_response_rejects_outline_item_without_actions() -> None:
    payload = json.dumps([{"title": "Hook", "focus": "f", "actions": []}])

    with pytest.raises(ResponseDecodeError):
        decode_response(payload, List[OutlineItemPayload])


def test_decode_response_for_string_lists() -> None:
    assert decode_response('```json\n["one", "two"]\n```', List[str]) == ["one", "two"]
