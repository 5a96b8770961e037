"""
Shared plumbing for the generation agents.
"""

import time
from typing import Any, Optional, Type, TypeVar

from loguru import logger

from bookcast.utils.key_pool import execute_request
from bookcast.utils.llm_client import ClientFactory, LLMClient
from bookcast.utils.logger import log_agent_action
from bookcast.utils.response_parser import decode_response

T = TypeVar("T")

LANGUAGE_NAMES = {
    "vi": "Vietnamese",
    "en": "English",
}


def language_name(language: str) -> str:
    """Human-readable language name used inside prompts."""
    return LANGUAGE_NAMES.get(language, LANGUAGE_NAMES["en"])


class BaseAgent:
    """Runs one prompt per call through the key pool of a provider."""

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self.client_factory = client_factory
        self.logger = logger.bind(name=self.__class__.__name__)

    async def _generate_text(
        self,
        prompt: str,
        model: str,
        api_key_input: Optional[str],
        provider: str
    ) -> str:
        """Free-text generation."""
        start_time = time.time()

        async def operation(client: LLMClient) -> str:
            return await client.generate_text(prompt, model=model)

        text = await execute_request(
            api_key_input, operation, provider=provider, client_factory=self.client_factory
        )
        log_agent_action(
            agent_name=self.__class__.__name__,
            action="generate_text",
            input_data={"prompt_length": len(prompt)},
            output_data={"response_length": len(text)},
            duration=time.time() - start_time
        )
        return text

    async def _generate_json(
        self,
        prompt: str,
        model: str,
        api_key_input: Optional[str],
        provider: str,
        schema: Type[T]
    ) -> T:
        """Schema-guided generation, decoded and validated against ``schema``.

        Decoding happens inside the operation, so an undecodable reply from one
        key fails over to the next key like any other error.
        """
        start_time = time.time()

        async def operation(client: LLMClient) -> Any:
            text = await client.generate_text(prompt, model=model, response_schema=schema)
            return decode_response(text, schema)

        result = await execute_request(
            api_key_input, operation, provider=provider, client_factory=self.client_factory
        )
        log_agent_action(
            agent_name=self.__class__.__name__,
            action="generate_json",
            input_data={"prompt_length": len(prompt)},
            output_data={"result": result},
            duration=time.time() - start_time
        )
        return result
