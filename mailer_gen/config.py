"""
Runtime configuration loaded from the environment (and a local .env file).
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from mailer_gen.errors import ConfigurationError


# Environment variables holding the credential for each provider, in lookup order
API_KEY_ENV_VARS: Dict[str, tuple] = {
    "google": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
}

DEFAULT_GENERATION_MODELS = {
    "google": "gemini-2.0-flash-exp",
    "openai": "gpt-4o",
    "anthropic": "claude-3-5-sonnet-20241022",
}

DEFAULT_VISION_MODELS = {
    "google": "gemini-2.0-flash",
    "openai": "gpt-4o",
    "anthropic": "claude-3-5-sonnet-20241022",
}


class Settings(BaseModel):
    """Provider, model and credential settings for remote calls."""
    provider: str = "google"
    generation_model: Optional[str] = None
    vision_model: Optional[str] = None
    api_key: Optional[str] = None

    @classmethod
    def from_env(cls, provider: Optional[str] = None, load_env_file: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Reads GENERATION_PROVIDER (unless a provider is given), GENERATION_MODEL,
        VISION_MODEL and the provider's API key variable.

        Raises:
            ConfigurationError: If the provider is not supported.
        """
        if load_env_file:
            load_dotenv()

        provider = (provider or os.getenv("GENERATION_PROVIDER", "google")).lower()
        if provider not in API_KEY_ENV_VARS:
            raise ConfigurationError(f"Error: Unsupported provider: {provider}")

        api_key = None
        for env_var in API_KEY_ENV_VARS[provider]:
            api_key = os.getenv(env_var)
            if api_key:
                break

        return cls(
            provider=provider,
            generation_model=os.getenv("GENERATION_MODEL"),
            vision_model=os.getenv("VISION_MODEL"),
            api_key=api_key,
        )

    @property
    def resolved_generation_model(self) -> str:
        return self.generation_model or DEFAULT_GENERATION_MODELS[self.provider]

    @property
    def resolved_vision_model(self) -> str:
        return self.vision_model or DEFAULT_VISION_MODELS[self.provider]

    def require_api_key(self) -> str:
        """
        Return the configured API key.

        Raises:
            ConfigurationError: If no key is configured for the provider.
        """
        if not self.api_key:
            env_var = API_KEY_ENV_VARS.get(self.provider, ("API_KEY",))[0]
            raise ConfigurationError(
                f"Error: API key not configured. Please add your {self.provider} "
                f"API key to the .env file as {env_var}."
            )
        return self.api_key
