"""
Writer Agent: writes the story text for one outline section.
"""

from typing import Optional

from bookcast.agents.base import BaseAgent, language_name
from bookcast.core.models import OutlineItem


class WriterAgent(BaseAgent):
    """AI agent responsible for turning an outline section into narrative prose."""

    def build_prompt(self, item: OutlineItem, book_title: str, book_idea: str, language: str) -> str:
        idea_text = f"\nKeep to this idea / context: {book_idea}" if book_idea else ""
        return f"""
            You are an expert storyteller writing the book "{book_title}".{idea_text}

            Write the full story text for the section "{item.title}".
            What this section is about: {item.focus}
            Points it must cover: {', '.join(item.actions)}

            Write continuous, vivid prose with natural transitions. Do not add headings,
            notes or commentary; return only the story text.
            Write in {language_name(language)}.
            """

    async def generate_story_block(
        self,
        item: OutlineItem,
        book_title: str,
        model: str,
        api_key_input: Optional[str],
        provider: str,
        book_idea: str = "",
        language: str = "vi"
    ) -> str:
        """Generate the story text for one outline item."""
        self.logger.info(f"Writing story section {item.index}: {item.title}")
        prompt = self.build_prompt(item, book_title, book_idea, language)
        return await self._generate_text(prompt, model, api_key_input, provider)
