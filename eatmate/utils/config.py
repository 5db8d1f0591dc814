"""Configuration management for the EatMate client core.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Spoonacular API Key: sent as the apiKey query parameter on every call
        self.SPOONACULAR_API_KEY: str = os.getenv("SPOONACULAR_API_KEY", "")
        self.SPOONACULAR_BASE_URL: str = os.getenv("SPOONACULAR_BASE_URL", "https://api.spoonacular.com")
        # Result-count cap sent with every search. Default: 10
        self.MAX_RECIPES: int = int(os.getenv("MAX_RECIPES", "10"))

        # Completion Provider: "openai" (bearer-token chat completions) or "gemini"
        self.COMPLETION_PROVIDER: str = os.getenv("COMPLETION_PROVIDER", "openai").lower()
        self.OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
        self.COMPLETION_API_URL: str = os.getenv(
            "COMPLETION_API_URL", "https://api.openai.com/v1/chat/completions"
        )
        self.COMPLETION_MODEL: str = os.getenv("COMPLETION_MODEL", "gpt-4o")
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Default: gemini-2.5-flash-lite (fast, cost-effective for short cooking answers)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")
        # Max Output Tokens: fixed response-length cap for assistant replies
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "500"))

        # Theme preference file used by the JSON key-value store
        self.THEME_STORE_PATH: str = os.getenv("THEME_STORE_PATH", ".eatmate/preferences.json")

    def validate(self) -> None:
        """Validate configuration values.

        API keys are checked by the clients that need them, so a missing
        completion key does not stop recipe search from working.

        Raises:
            ValueError: If invalid values are provided.
        """
        if self.COMPLETION_PROVIDER not in ("openai", "gemini"):
            raise ValueError(
                f"COMPLETION_PROVIDER must be 'openai' or 'gemini', got: {self.COMPLETION_PROVIDER}"
            )
        if self.MAX_RECIPES < 1:
            raise ValueError(f"MAX_RECIPES must be at least 1, got: {self.MAX_RECIPES}")
        if self.MAX_OUTPUT_TOKENS < 1:
            raise ValueError(f"MAX_OUTPUT_TOKENS must be at least 1, got: {self.MAX_OUTPUT_TOKENS}")
        if not self.SPOONACULAR_BASE_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"SPOONACULAR_BASE_URL must be an http(s) URL, got: {self.SPOONACULAR_BASE_URL}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
