"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    designirl_env: str = "development"
    designirl_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # External backends (API keys are per-session user input, never settings)
    search_api_url: str = "https://api.scrapecreators.com/v1/pinterest/search"
    image_proxy_url: str = "https://images.weserv.nl/"
    http_timeout_s: float = 30.0

    # Seconds between rotating loading messages during generation and edits
    loading_message_interval_s: float = 3.0

    # Model routing
    model_analysis: str = "gemini-2.5-flash"
    model_image: str = "gemini-2.5-flash-image-preview"

    # Selection bounds for the Generate / TryOn pathways
    default_max_selections: int = 5
    max_selections_limit: int = 10

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
