from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    LOG_LEVEL: str = "INFO"

    # AI Gateway Configuration
    AI_GATEWAY_API_KEY: str = ""
    VERCEL_AI_GATEWAY_KEY: str = ""
    AI_GATEWAY_URL: str = "https://ai-gateway.vercel.sh/v1"
    IMAGE_MODEL: str = "google/gemini-2.5-flash-image-preview"
    GENERATION_TIMEOUT_SECONDS: float = 180.0
    GENERATION_RETRY_MULTIPLIER: float = 1.0

    # Shopify Admin API Configuration
    SHOPIFY_STORE_DOMAIN: str = ""
    SHOPIFY_ACCESS_TOKEN: str = ""
    SHOPIFY_API_VERSION: str = "2025-07"
    SHOPIFY_VENDOR: str = "AI Generated"
    SHOPIFY_REQUEST_TIMEOUT_SECONDS: float = 60.0

    # File paths
    DATA_PATH: Path = Path(__file__).parent.parent.joinpath("data")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def gateway_api_key(self) -> str:
        """AI_GATEWAY_API_KEY wins over the legacy VERCEL_AI_GATEWAY_KEY."""
        return (self.AI_GATEWAY_API_KEY or self.VERCEL_AI_GATEWAY_KEY).strip()


# Create a singleton instance
settings = AppConfig()
