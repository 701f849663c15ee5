"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-derived secrets and flags.

    Read once at the process edge and passed explicitly into the pipeline.
    """

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    claude_api_key: str | None = Field(default=None, validation_alias="CLAUDE_API_KEY")
    claude_model: str | None = Field(default=None, validation_alias="CLAUDE_MODEL")
    custom_proxy_url: str | None = Field(
        default=None, validation_alias="CUSTOM_PROXY_URL"
    )
    digest_timezone: str | None = Field(default=None, validation_alias="DIGEST_TIMEZONE")

    @property
    def has_summary_key(self) -> bool:
        """Whether a non-blank summarization key is configured."""
        return bool(self.claude_api_key and self.claude_api_key.strip())


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
