"""Application settings.

Sources, lowest precedence first:
- appsettings.json
- appsettings.{environment}.json
  (a legacy `AzureAI` section with `Endpoint`/`AgentId`/`ApiKey` keys is read as `azure_ai`)
- .env file
- environment variables (APP_ prefix, `__` for nested keys, e.g. APP_AZURE_AI__ENDPOINT)
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, model_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from recruiting_agent.core.errors import ConfigurationError

SECTION_NAME = 'azure_ai'
LEGACY_SECTION_NAME = 'AzureAI'
ENVIRONMENT = os.environ.get('APP_ENVIRONMENT', 'Development')

_http_url = TypeAdapter(HttpUrl)


class AzureAIOptions(BaseModel):
    """Connection settings for the hosted agent service."""

    model_config = ConfigDict(populate_by_name=True)

    endpoint: str = Field(default='', validation_alias=AliasChoices('endpoint', 'Endpoint'))
    agent_id: str = Field(default='', validation_alias=AliasChoices('agent_id', 'AgentId'))
    api_key: str = Field(default='', validation_alias=AliasChoices('api_key', 'ApiKey'))
    api_version: str = 'v1'
    model: str = 'gpt-4o'

    def validate_options(self, *, require_agent_id: bool = True) -> None:
        """Check the options needed to talk to the agent service.

        Raises:
            ConfigurationError: Naming the first missing or invalid setting.
        """
        if not self.endpoint.strip():
            raise ConfigurationError(
                f"Configuration section '{SECTION_NAME}:endpoint' is required but was not found or is empty."
            )
        try:
            _http_url.validate_python(self.endpoint)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Configuration value '{SECTION_NAME}:endpoint' must be a valid URI."
            ) from exc
        if require_agent_id and not self.agent_id.strip():
            raise ConfigurationError(
                f"Configuration section '{SECTION_NAME}:agent_id' is required but was not found or is empty."
            )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='APP_',
        env_file='.env',
        env_nested_delimiter='__',
        json_file=('appsettings.json', f'appsettings.{ENVIRONMENT}.json'),
        extra='ignore',
    )

    environment: str = ENVIRONMENT
    azure_ai: AzureAIOptions = AzureAIOptions()

    log_level: str = 'INFO'

    # Agent runs
    run_poll_interval: float = 0.5
    run_timeout: float = 120.0
    request_timeout: float = 60.0

    @model_validator(mode='before')
    @classmethod
    def _merge_legacy_section(cls, data: Any) -> Any:
        """Fold an `AzureAI` section (PascalCase keys) under `azure_ai`; `azure_ai` keys win."""
        if not isinstance(data, dict) or LEGACY_SECTION_NAME not in data:
            return data
        data = dict(data)
        legacy = data.pop(LEGACY_SECTION_NAME)
        current = data.get(SECTION_NAME)
        if isinstance(legacy, dict) and isinstance(current, dict):
            data[SECTION_NAME] = {**legacy, **current}
        elif current is None:
            data[SECTION_NAME] = legacy
        return data

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
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
