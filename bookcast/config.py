"""
Configuration management for the Bookcast content studio.
"""

import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _first_env(names: List[str]) -> str:
    """Return the first non-empty environment value among ``names``."""
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


class Settings:
    """Application settings with environment variable support."""

    def __init__(self):
        """Initialize settings from environment variables."""
        # Google Gemini API Configuration (single fallback credential)
        self.google_api_key = _first_env(["API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"])
        # OpenAI API Configuration
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "").strip()

        # Application Settings
        self.app_name = os.getenv("APP_NAME", "Bookcast Content Studio")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_file = os.getenv("LOG_FILE", "")

        # Generation Settings
        self.default_model = os.getenv("DEFAULT_MODEL", "gemini-3-pro-preview")
        self.default_language = os.getenv("DEFAULT_LANGUAGE", "vi")
        self.upload_chunk_chars = int(os.getenv("UPLOAD_CHUNK_CHARS", "3000"))
        self.chars_per_minute = int(os.getenv("CHARS_PER_MINUTE", "1000"))
        self.default_chapters = int(os.getenv("DEFAULT_CHAPTERS", "12"))
        self.default_duration_min = int(os.getenv("DEFAULT_DURATION_MIN", "240"))
        self.default_frame_ratio = os.getenv("DEFAULT_FRAME_RATIO", "9:16")

        # Storage Settings
        self.key_store_path = os.getenv(
            "KEY_STORE_PATH",
            str(Path.home() / ".bookcast" / "keys.json")
        )

    @property
    def gemini_api_key(self) -> str:
        """Get the Gemini API key (alias for google_api_key)."""
        return self.google_api_key

    @property
    def openai_key(self) -> str:
        """Get the OpenAI API key."""
        return self.openai_api_key

    def env_key_for(self, provider: str) -> Optional[str]:
        """Get the environment fallback credential for a provider family."""
        if provider == "openai":
            return self.openai_api_key or None
        if provider == "gemini":
            return self.google_api_key or None
        if provider == "mock":
            # The offline client needs no real credential
            return "mock-offline-key"
        return None


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


def reload_settings() -> Settings:
    """Re-read the environment into a fresh global settings instance."""
    global settings
    settings = Settings()
    return settings
