"""
Outline Agent: turns a book title into the section outline of an audiobook-style video.
"""

from typing import List, Optional

from bookcast.agents.base import BaseAgent, language_name
from bookcast.core.models import OUTLINE_SCHEMA, OutlineItemPayload


class OutlineAgent(BaseAgent):
    """AI agent that drafts the script outline for a book video."""

    def build_prompt(
        self,
        book_title: str,
        book_idea: str,
        chapters_count: int,
        duration_min: int,
        language: str
    ) -> str:
        idea_text = f'\nIdea / context from the author: "{book_idea}"' if book_idea else ""
        return f"""
            Based on the book "{book_title}", create the script outline for a {duration_min}-minute
            YouTube video in a humanistic audiobook style.{idea_text}

            The outline should contain about {chapters_count} main content chapters and follow this structure:
            1. Hook
            2. Intro + the narrator's point of view
            3. The main chapters (titled after the book's likely themes)
            4. A 7-day action plan
            5. A summary of 3 key points
            6. Call to action (CTA)

            For every item give a 'title', a 'focus' (what that part covers) and a list of 3-4
            'actions' (the key points to talk about).
            Answer in {language_name(language)}.
            """

    async def generate_outline(
        self,
        book_title: str,
        model: str,
        api_key_input: Optional[str],
        provider: str,
        book_idea: str = "",
        chapters_count: int = 12,
        duration_min: int = 240,
        language: str = "vi"
    ) -> List[OutlineItemPayload]:
        """
        Generate the outline in a single request.

        Returns:
            Outline items in the order the model produced them, not yet indexed
        """
        self.logger.info(f"Generating outline for '{book_title}' with {model}")
        prompt = self.build_prompt(book_title, book_idea, chapters_count, duration_min, language)
        items = await self._generate_json(
            prompt, model, api_key_input, provider, OUTLINE_SCHEMA
        )
        self.logger.info(f"Outline generated with {len(items)} items")
        return items
