"""Pytest configuration and fixtures for integration tests.

Ensures environment variables are loaded and validates required API keys
before running integration tests against the live services.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env before test collection so eatmate config sees the keys."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    # Keep live runs readable
    os.environ.setdefault("LOG_LEVEL", "WARNING")

    print("\n" + "=" * 70)
    print("Note: These tests require SPOONACULAR_API_KEY and a completion key")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip the whole session if Spoonacular is not configured."""
    if not os.getenv("SPOONACULAR_API_KEY"):
        pytest.skip(
            "Integration tests skipped. Missing API keys: SPOONACULAR_API_KEY. Please set it in your .env file.",
            allow_module_level=True,
        )


@pytest.fixture
def completion_key():
    """Skip completion tests unless the selected provider has a key."""
    provider = os.getenv("COMPLETION_PROVIDER", "openai").lower()
    key_name = "GEMINI_API_KEY" if provider == "gemini" else "OPENAI_API_KEY"
    if not os.getenv(key_name):
        pytest.skip(f"Completion tests skipped. Missing API key: {key_name}")
    return key_name
