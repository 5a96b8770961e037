"""
Media Agent: background video prompts and thumbnail text ideas.
"""

from typing import List, Optional

from bookcast.agents.base import BaseAgent, language_name
from bookcast.core.models import STRING_LIST_SCHEMA
from bookcast.utils.text import format_duration


class MediaAgent(BaseAgent):
    """AI agent suggesting visuals for a book video."""

    def build_video_prompt(self, book_title: str, frame_ratio: str) -> str:
        return f"""
            Generate 5 cinematic, photorealistic video prompts for background visuals in a
            YouTube video about the book "{book_title}". The prompts should be inspired by the
            book's main themes (e.g. if about stoicism, think calm nature and ancient architecture;
            if sci-fi, think cosmic visuals). Each prompt MUST be for the aspect ratio {frame_ratio}.
            The style should be beautiful, subtle and non-distracting. Do not include any text or logos.
            Respond with a JSON array of strings.
            """

    def build_thumbnail_prompt(self, book_title: str, duration_min: int, language: str) -> str:
        return f"""
            For a YouTube video about the book "{book_title}", suggest 5 short, high-impact text
            ideas for the thumbnail. The text must be catchy and written in {language_name(language)}.
            One idea must include the duration: {format_duration(duration_min)}.
            Respond with a JSON array of strings.
            """

    async def generate_video_prompts(
        self,
        book_title: str,
        model: str,
        api_key_input: Optional[str],
        provider: str,
        frame_ratio: str = "9:16"
    ) -> List[str]:
        prompt = self.build_video_prompt(book_title, frame_ratio)
        return await self._generate_json(prompt, model, api_key_input, provider, STRING_LIST_SCHEMA)

    async def generate_thumbnail_ideas(
        self,
        book_title: str,
        model: str,
        api_key_input: Optional[str],
        provider: str,
        duration_min: int = 240,
        language: str = "vi"
    ) -> List[str]:
        prompt = self.build_thumbnail_prompt(book_title, duration_min, language)
        return await self._generate_json(prompt, model, api_key_input, provider, STRING_LIST_SCHEMA)
