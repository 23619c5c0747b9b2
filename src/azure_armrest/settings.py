"""Library settings loaded from environment variables."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ArmrestSettings(BaseSettings):
    """Endpoints and defaults shared by every service wrapper.

    Values are read from ``ARMREST_*`` environment variables
    (case-insensitive) and optionally from a ``.env`` file in the working
    directory.
    """

    authority: str = "https://login.windows.net/"
    resource: str = "https://management.azure.com/"
    api_version: str = "2015-01-01"
    request_timeout: int = 30

    model_config = SettingsConfigDict(
        env_prefix="ARMREST_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("authority", "resource")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"


class EnvironmentCredentials(BaseSettings):
    """Service principal credentials from the conventional ``AZURE_*`` variables."""

    client_id: str = ""
    client_secret: str = ""
    tenant_id: str = ""
    subscription_id: str = ""
    resource_group: str = ""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    def to_options(self) -> dict[str, str]:
        """Return the non-empty values as ``configure()`` options."""
        return {key: value for key, value in self.model_dump().items() if value}


settings = ArmrestSettings()
