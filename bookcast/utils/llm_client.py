"""
LLM clients for the generation providers Bookcast can talk to.

Every client is bound to exactly one API key; the key pool builds one client
per candidate key and hands it to the caller's operation.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from loguru import logger
from pydantic import TypeAdapter
from bookcast.utils.logger import log_agent_action


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    provider: str = ""

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        model: str,
        response_schema: Optional[Any] = None,
        temperature: Optional[float] = None
    ) -> str:
        """Generate text; with ``response_schema`` the text is expected to be JSON."""


class GeminiClient(LLMClient):
    """Gemini-specific LLM client implementation."""

    provider = "gemini"

    def __init__(self, api_key: str):
        """Initialize the Gemini client for a single key."""
        from google import genai

        self.client = genai.Client(api_key=api_key)
        self.logger = logger.bind(name="GeminiClient")

    async def generate_text(
        self,
        prompt: str,
        model: str,
        response_schema: Optional[Any] = None,
        temperature: Optional[float] = None
    ) -> str:
        """Generate text using a Gemini model."""
        from google.genai import types

        start_time = time.time()
        config = types.GenerateContentConfig(temperature=temperature)
        if response_schema is not None:
            config.response_mime_type = "application/json"
            config.response_schema = response_schema

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=config
            )
        except Exception as e:
            self.logger.error(f"Error generating text with {model}: {e}")
            log_agent_action(
                agent_name=model,
                action="text_generation_error",
                input_data={"prompt_length": len(prompt)},
                duration=time.time() - start_time
            )
            raise

        text = response.text or ""
        log_agent_action(
            agent_name=model,
            action="text_generation",
            input_data={"prompt_length": len(prompt)},
            output_data={"response_length": len(text)},
            duration=time.time() - start_time
        )
        return text


class OpenAIClient(LLMClient):
    """OpenAI-specific LLM client implementation."""

    provider = "openai"

    def __init__(self, api_key: str):
        """Initialize the OpenAI client for a single key."""
        import openai

        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.logger = logger.bind(name="OpenAIClient")

    async def generate_text(
        self,
        prompt: str,
        model: str,
        response_schema: Optional[Any] = None,
        temperature: Optional[float] = None
    ) -> str:
        """Generate text using an OpenAI chat model."""
        start_time = time.time()

        # Chat completions have no array-shaped JSON mode, so the schema goes in the prompt
        if response_schema is not None:
            schema = json.dumps(TypeAdapter(response_schema).json_schema(), ensure_ascii=False)
            prompt = f"{prompt}\n\nRespond with JSON only, matching this JSON schema:\n{schema}"

        kwargs = {}
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                **kwargs
            )
        except Exception as e:
            self.logger.error(f"Error generating text with {model}: {e}")
            log_agent_action(
                agent_name=model,
                action="text_generation_error",
                input_data={"prompt_length": len(prompt)},
                duration=time.time() - start_time
            )
            raise

        text = response.choices[0].message.content or ""
        log_agent_action(
            agent_name=model,
            action="text_generation",
            input_data={"prompt_length": len(prompt)},
            output_data={"response_length": len(text)},
            duration=time.time() - start_time
        )
        return text


ClientFactory = Callable[[str, str], LLMClient]


def provider_for_model(model: str) -> str:
    """Map a model name to the provider family whose keys it needs."""
    name = (model or "").strip().lower()
    if name.startswith("gpt"):
        return "openai"
    if name.startswith("mock"):
        return "mock"
    return "gemini"


def create_client(provider: str, api_key: str) -> LLMClient:
    """Create a client for ``provider`` bound to ``api_key``."""
    if provider == "openai":
        return OpenAIClient(api_key)
    if provider == "mock":
        from bookcast.utils.mock_llm_client import MockLLMClient
        return MockLLMClient(api_key)
    return GeminiClient(api_key)
