"""
Reviewer Agent: turns story text into a spoken "audiobook review" script.
"""

from typing import Optional

from bookcast.agents.base import BaseAgent, language_name


class ReviewerAgent(BaseAgent):
    """AI agent that narrates and reviews a story section for an audio recording."""

    def build_prompt(
        self,
        content: str,
        chapter_title: str,
        book_title: str,
        language: str,
        target_chars: Optional[int] = None
    ) -> str:
        length_text = f"\n            5. Aim for about {target_chars:,} characters" if target_chars else ""
        return f"""
            You are the narrator of a popular YouTube channel that reviews books as audiobooks.
            Your style is natural and conversational, mixing retelling with your personal point of view.

            BOOK: "{book_title}"
            SECTION: "{chapter_title}"

            SECTION TEXT:
            {content}

            INSTRUCTIONS:
            1. Retell the section in your own words so listeners can follow it without the book
            2. Add short personal reflections and lessons a listener can take away
            3. Keep sentences easy to read aloud; no headings, lists or stage directions
            4. Return only the script text, ready for recording{length_text}

            Write in {language_name(language)}.
            """

    async def generate_review_block(
        self,
        content: str,
        chapter_title: str,
        book_title: str,
        model: str,
        api_key_input: Optional[str],
        provider: str,
        language: str = "vi",
        target_chars: Optional[int] = None
    ) -> str:
        """Generate the review script for one story block."""
        self.logger.info(f"Reviewing story section: {chapter_title}")
        prompt = self.build_prompt(content, chapter_title, book_title, language, target_chars)
        return await self._generate_text(prompt, model, api_key_input, provider)
