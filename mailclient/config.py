"""Client configuration.

Settings come from the environment, optionally seeded from a ``.env`` file:

    WEBMAIL_BASE_URL       Mail store API base URL (default http://localhost:5000/api)
    WEBMAIL_TIMEOUT        Request timeout in seconds (default 30)
    WEBMAIL_RETRY_ENABLED  "true", "1", "yes" or "on" to retry transient failures (default off)
    WEBMAIL_MAX_RETRIES    Retry attempts when retry is enabled (default 3)
    WEBMAIL_TOKEN          Stored credential (JWT) of the signed-in user
    WEBMAIL_PAGE_SIZE      Emails per folder page (default 10)
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Connection and paging settings of the webmail client."""

    model_config = SettingsConfigDict(
        env_prefix="WEBMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
    )

    base_url: str = Field(default="http://localhost:5000/api", description="Mail store base URL")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    retry_enabled: bool = Field(default=False, description="Retry transient failures")
    max_retries: int = Field(default=3, ge=0, description="Retry attempts")
    token: SecretStr | None = Field(default=None, description="Stored JWT credential")
    page_size: int = Field(default=10, ge=1, description="Emails per folder page")

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "ClientSettings":
        """Build settings from the environment.

        Args:
            env_file: Path of a ``.env`` file to read instead of ``./.env``.
                Variables set in the environment take precedence over it.

        Returns:
            The settings; unset variables keep their defaults.
        """
        if env_file is None:
            return cls()
        return cls(_env_file=env_file)

    @property
    def token_value(self) -> str | None:
        """The credential as plain text, or None if not configured."""
        return self.token.get_secret_value() if self.token is not None else None
