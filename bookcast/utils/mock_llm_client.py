"""
Mock LLM client for running the pipeline without making actual API calls.
"""

import asyncio
import json
import time
from typing import Any, Callable, List, Optional

from loguru import logger

from bookcast.core.models import OUTLINE_SCHEMA, STRING_LIST_SCHEMA, SEOPayload
from bookcast.utils.llm_client import LLMClient
from bookcast.utils.logger import log_agent_action

Responder = Callable[[str, Optional[Any]], str]


class MockLLMClient(LLMClient):
    """Mock LLM client that simulates responses without API calls.

    A ``responder`` callable, when given, decides the reply (or raises to
    simulate a failing key); otherwise a canned reply matching the requested
    schema is returned.
    """

    provider = "mock"

    def __init__(self, api_key: str = "mock-offline-key", responder: Optional[Responder] = None):
        """Initialize the mock LLM client."""
        self.api_key = api_key
        self.responder = responder
        self.prompts: List[str] = []
        self.logger = logger.bind(name="MockLLMClient")

    async def generate_text(
        self,
        prompt: str,
        model: str = "mock-model",
        response_schema: Optional[Any] = None,
        temperature: Optional[float] = None
    ) -> str:
        """Generate a mock response."""
        start_time = time.time()

        # Yield to the event loop like a real network call would
        await asyncio.sleep(0)
        self.prompts.append(prompt)

        if self.responder is not None:
            text = self.responder(prompt, response_schema)
        else:
            text = self._canned_response(prompt, response_schema)

        log_agent_action(
            agent_name=model,
            action="text_generation",
            input_data={"prompt_length": len(prompt)},
            output_data={"response_length": len(text)},
            duration=time.time() - start_time
        )
        return text

    def _canned_response(self, prompt: str, response_schema: Optional[Any]) -> str:
        if response_schema == OUTLINE_SCHEMA:
            items = [
                {
                    "title": f"Mock section {n}",
                    "focus": f"What section {n} is about",
                    "actions": [f"Point {n}.1", f"Point {n}.2", f"Point {n}.3"]
                }
                for n in range(1, 4)
            ]
            return json.dumps(items)
        if response_schema is SEOPayload:
            return json.dumps({
                "titles": [f"Mock title {n}" for n in range(1, 9)],
                "hashtags": ["#audiobook", "#bookreview"],
                "keywords": ["audiobook", "book review"],
                "description": "A mock video description."
            })
        if response_schema == STRING_LIST_SCHEMA:
            return json.dumps([f"Mock idea {n}" for n in range(1, 6)])
        return f"This is a mock response from the LLM for a prompt of {len(prompt)} characters."
