"""Test configuration helpers."""

import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bookcast.config import get_settings  # noqa: E402
from bookcast.utils.mock_llm_client import MockLLMClient  # noqa: E402


@pytest.fixture(autouse=True)
def no_env_keys(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep real credentials and the user's key store out of every test."""
    settings = get_settings()
    monkeypatch.setattr(settings, "google_api_key", "")
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "key_store_path", str(tmp_path / "keys.json"))
    return settings


def scripted_factory(
    responder: Optional[Callable[[str, str, object], str]] = None,
    created: Optional[List[str]] = None,
):
    """Client factory whose clients answer through ``responder(api_key, prompt, schema)``."""

    def factory(provider: str, api_key: str) -> MockLLMClient:
        if created is not None:
            created.append(api_key)
        if responder is None:
            return MockLLMClient(api_key)
        return MockLLMClient(api_key, responder=lambda prompt, schema: responder(api_key, prompt, schema))

    return factory
