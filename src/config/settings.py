"""Application settings loaded via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# Sources, highest priority first:
#
#   1. Keyword arguments -- Settings(chroma_port=8001), used by tests
#   2. Environment variables -- e.g. OBSIDIAN_API_KEY=...
#   3. .env file -- local developer overrides (not committed)
#   4. config/config.yaml -- static, non-secret defaults
#   5. Field defaults below
#
# Field names map to upper-cased env vars: `chroma_host` <- CHROMA_HOST.
# Fields without a default are required; a missing one makes Settings()
# raise, which load_settings() turns into a ConfigurationError.
# ──────────────────────────────────────────────────────────────────────
"""

import httpx
from pydantic import Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


class Settings(BaseSettings):
    """Vault sync settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file="config/config.yaml",
        extra="ignore",
    )

    # === Obsidian Local REST API ===
    obsidian_api_url: str
    obsidian_api_port: int = Field(gt=0, lt=65536)
    obsidian_api_key: SecretStr
    # The plugin serves a self-signed certificate by default.
    obsidian_verify_tls: bool = True
    obsidian_timeout: float = Field(default=30.0, gt=0)

    # === ChromaDB ===
    chroma_host: str
    chroma_port: int = Field(gt=0, lt=65536)
    chroma_ssl: bool = False
    chroma_collection: str = "obsidian_notes"

    # === Embeddings ===
    # Unset selects Chroma's default embedding function.
    embedding_model: str | None = None

    # === Sync behaviour ===
    sync_chunk_size: int = Field(default=10, ge=1)
    # 0 = unbounded fan-out.
    sync_max_concurrency: int = Field(default=0, ge=0)
    sync_isolate_chunk_failures: bool = False

    # === App ===
    app_env: str = "development"
    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def obsidian_base_url(self) -> str:
        """``OBSIDIAN_API_URL`` with its port replaced by ``OBSIDIAN_API_PORT``."""
        return str(httpx.URL(self.obsidian_api_url).copy_with(port=self.obsidian_api_port))
