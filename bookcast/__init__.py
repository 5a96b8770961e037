"""
Bookcast Content Studio

Turns a book title into an audiobook-style video package with Gemini or OpenAI:
outline, story, review script, SEO metadata and visual prompts.
"""

__version__ = "1.0.0"
__description__ = "AI content pipeline for audiobook-style book videos"
