"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

CLASSIFIER_BACKENDS = frozenset({"stub", "openai"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    classifier_backend: str = "stub"
    classifier_delay_seconds: float = 1.5
    classifier_timeout_seconds: float = 30.0
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    trial_days: int = 7
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_classifier_backend(settings: Settings) -> str:
    """Return the normalized classifier backend or raise ValueError."""
    backend = settings.classifier_backend.strip().lower()
    if backend not in CLASSIFIER_BACKENDS:
        raise ValueError(f"Unknown classifier backend: {settings.classifier_backend}")
    if backend == "openai" and not settings.openai_api_key:
        raise ValueError("OPENAI_API_KEY is required for the openai classifier")
    return backend
