# app/config.py
from typing import Literal
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCTION_HOST = "https://api.amadeus.com"
TEST_HOST = "https://test.api.amadeus.com"


class Settings(BaseSettings):
    # App
    APP_ENV: Literal["dev", "prod", "staging"] = "dev"

    # Amadeus credentials (the edge-function names are accepted too)
    AMADEUS_CLIENT_ID: str = Field(
        validation_alias=AliasChoices("AMADEUS_CLIENT_ID", "AMADEUS_API_KEY")
    )
    AMADEUS_CLIENT_SECRET: str = Field(
        validation_alias=AliasChoices("AMADEUS_CLIENT_SECRET", "AMADEUS_API_SECRET")
    )
    AMADEUS_ENV: str = "test"  # or "production"

    # Token cache
    AMADEUS_TOKEN_MARGIN_SECONDS: int = 30
    AMADEUS_DEFAULT_TOKEN_LIFETIME: int = 1500

    # Transport
    AMADEUS_HTTP_TIMEOUT_SECONDS: float = 30.0

    # Search defaults
    DEFAULT_CURRENCY: str = "THB"
    DEFAULT_MAX_OFFERS: int = 50
    MAX_OFFERS_CAP: int = 250

    # read .env and ignore any extra keys so this doesn't break again
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def amadeus_host(self) -> str:
        return PRODUCTION_HOST if self.AMADEUS_ENV == "production" else TEST_HOST


settings = Settings()
