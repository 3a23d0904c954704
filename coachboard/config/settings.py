"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or .env) with sensible
defaults. Using Pydantic's BaseSettings means a wrong type fails at startup
instead of on the first request that needs it.

Mock mode swaps Firestore for an in-memory store, so the whole API runs
without a Firebase project.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Coachboard API"
    api_version: str = "v1"

    # Firebase / Firestore
    app_id: str = Field(
        default="default-app-id",
        description="Namespace of this deployment's data under artifacts/{app_id}/public/data",
    )
    firebase_project_id: Optional[str] = Field(
        default=None,
        description="Firebase project id. Taken from the credentials when unset.",
    )
    firebase_credentials_path: Optional[str] = Field(
        default=None,
        description="Path to a service account JSON file. Application default credentials otherwise.",
    )
    firebase_initial_auth_token: Optional[str] = Field(
        default=None,
        description="ID token verified through Firebase Auth before any store access",
    )
    firestore_mock_mode: bool = Field(
        default=False,
        description="Use the in-memory store instead of Firestore. Enables local dev without Firebase.",
    )
    seed_demo_data: bool = Field(
        default=True,
        description="Seed the demo student and lexicon when the store is empty",
    )

    # Application Behavior
    default_language: str = Field(
        default="fr",
        description="Language of newly opened app sessions (fr or en)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields. Application default
        credentials need a project id from somewhere, so without a
        credentials file the project id must be set.
        """
        missing = []

        if not self.firestore_mock_mode:
            if not self.app_id:
                missing.append("APP_ID")
            if not self.firebase_credentials_path and not self.firebase_project_id:
                missing.append("FIREBASE_CREDENTIALS_PATH or FIREBASE_PROJECT_ID")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
