import asyncio
import json
from typing import List

import pytest

from bookcast.agents.media_agent import MediaAgent
from bookcast.agents.outline_agent import OutlineAgent
from bookcast.agents.reviewer_agent import ReviewerAgent
from bookcast.agents.seo_agent import SEOAgent
from bookcast.agents.writer_agent import WriterAgent
from bookcast.core.models import OUTLINE_SCHEMA, STRING_LIST_SCHEMA, OutlineItem, SEOPayload
from bookcast.utils import key_pool
from bookcast.utils.errors import ResponseDecodeError
from bookcast.utils.llm_client import create_client, provider_for_model
from bookcast.utils.mock_llm_client import MockLLMClient

from conftest import scripted_factory


@pytest.mark.parametrize("model, provider", [
    ("gemini-3-pro-preview", "gemini"),
    ("gemini-3-flash-preview", "gemini"),
    ("gpt-4o", "openai"),
    ("GPT-4o-mini", "openai"),
    ("mock-offline", "mock"),
    ("", "gemini"),
])
def test_provider_for_model(model: str, provider: str) -> None:
    assert provider_for_model(model) == provider


def test_create_client_for_offline_provider() -> None:
    client = create_client("mock", "any-key")

    assert isinstance(client, MockLLMClient)
    assert client.api_key == "any-key"


def test_mock_client_canned_replies_match_schema() -> None:
    client = MockLLMClient()

    outline = json.loads(asyncio.run(client.generate_text("p", response_schema=OUTLINE_SCHEMA)))
    seo = json.loads(asyncio.run(client.generate_text("p", response_schema=SEOPayload)))
    ideas = json.loads(asyncio.run(client.generate_text("p", response_schema=STRING_LIST_SCHEMA)))
    text = asyncio.run(client.generate_text("hello"))

    assert len(outline) == 3 and all(item["actions"] for item in outline)
    assert len(seo["titles"]) == 8
    assert len(ideas) == 5
    assert isinstance(text, str) and text
    assert client.prompts == ["p", "p", "p", "hello"]


def test_outline_prompt_carries_inputs() -> None:
    prompt = OutlineAgent().build_prompt("Atomic Habits", "small steps", 8, 120, "vi")

    assert '"Atomic Habits"' in prompt
    assert "small steps" in prompt
    assert "about 8 main content chapters" in prompt
    assert "120-minute" in prompt
    assert "Vietnamese" in prompt


def test_outline_prompt_omits_empty_idea() -> None:
    prompt = OutlineAgent().build_prompt("Atomic Habits", "", 12, 240, "en")

    assert "Idea / context" not in prompt
    assert "English" in prompt


def test_writer_prompt_names_the_section_and_its_points() -> None:
    item = OutlineItem(index=2, title="The 1% rule", focus="Compounding", actions=["Habit loop", "Identity"])

    prompt = WriterAgent().build_prompt(item, "Atomic Habits", "", "en")

    assert 'the section "The 1% rule"' in prompt
    assert "Compounding" in prompt
    assert "Habit loop, Identity" in prompt


def test_reviewer_prompt_embeds_story_text() -> None:
    prompt = ReviewerAgent().build_prompt("Once upon a time", "Part 1 (Upload)", "Deep Work", "vi")

    assert "Once upon a time" in prompt
    assert '"Part 1 (Upload)"' in prompt
    assert "Vietnamese" in prompt


def test_media_prompts_carry_frame_ratio_and_duration() -> None:
    agent = MediaAgent()

    assert "16:9" in agent.build_video_prompt("Dune", "16:9")
    thumbnail = agent.build_thumbnail_prompt("Dune", 95, "en")
    assert "thumbnail" in thumbnail
    assert "1H35M" in thumbnail


def test_seo_agent_decodes_payload() -> None:
    payload = {"titles": ["a"], "hashtags": ["#b"], "keywords": ["c"], "description": "d"}
    agent = SEOAgent(scripted_factory(lambda key, prompt, schema: json.dumps(payload)))

    result = asyncio.run(agent.generate_seo("Dune", "gemini-3-pro-preview", "key", "gemini"))

    assert isinstance(result, SEOPayload)
    assert result.description == "d"


def test_undecodable_reply_fails_over_to_next_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(key_pool.random, "randrange", lambda n: 0)

    def responder(api_key, prompt, schema):
        return "not json" if api_key == "first" else json.dumps(["idea"])

    agent = MediaAgent(scripted_factory(responder))

    ideas = asyncio.run(agent.generate_thumbnail_ideas("Dune", "gemini-3-pro-preview", "first\nsecond", "gemini"))

    assert ideas == ["idea"]


def test_undecodable_reply_on_every_key_raises_decode_error() -> None:
    agent = MediaAgent(scripted_factory(lambda key, prompt, schema: "```json\n```"))

    with pytest.raises(ResponseDecodeError):
        asyncio.run(agent.generate_video_prompts("Dune", "gemini-3-pro-preview", "only", "gemini"))


def test_review_block_is_free_text_from_a_single_key() -> None:
    created: List[str] = []
    seen_prompts: List[str] = []

    def responder(api_key, prompt, schema):
        seen_prompts.append(prompt)
        assert schema is None
        return "script text"

    agent = ReviewerAgent(scripted_factory(responder, created))

    text = asyncio.run(agent.generate_review_block("story", "Hook", "Dune", "gpt-4o", "sk-1", "openai"))

    assert text == "script text"
    assert created == ["sk-1"]
    assert len(seen_prompts) == 1


def test_reviewer_prompt_mentions_target_length_only_when_given() -> None:
    agent = ReviewerAgent()

    assert "about 2,500 characters" in agent.build_prompt("story", "Hook", "Dune", "en", target_chars=2500)
    assert "characters" not in agent.build_prompt("story", "Hook", "Dune", "en")
