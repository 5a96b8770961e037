"""
SEO Agent: titles, hashtags, keywords and description for the video listing.
"""

from typing import Optional

from bookcast.agents.base import BaseAgent, language_name
from bookcast.core.models import SEOPayload


class SEOAgent(BaseAgent):
    """AI agent producing search metadata for a book video."""

    def build_prompt(self, book_title: str, duration_min: int, language: str) -> str:
        return f"""
            Create SEO content for a YouTube video about the book "{book_title}".
            The video is a {duration_min}-minute analysis in audiobook style.

            Provide: 8 catchy titles, a list of relevant hashtags, a list of keywords,
            and an engaging video description.
            Answer in {language_name(language)}.
            """

    async def generate_seo(
        self,
        book_title: str,
        model: str,
        api_key_input: Optional[str],
        provider: str,
        duration_min: int = 240,
        language: str = "vi"
    ) -> SEOPayload:
        """Generate all SEO fields in one request."""
        self.logger.info(f"Generating SEO metadata for '{book_title}'")
        prompt = self.build_prompt(book_title, duration_min, language)
        return await self._generate_json(prompt, model, api_key_input, provider, SEOPayload)
