# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_amplifier

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from coreason_amplifier.integrations.vault import VaultIntegrator

DEFAULT_SYSTEM_PROMPT = (
    "You are a code review assistant. Analyze the code for errors, improvements, and security "
    "vulnerabilities. Provide a score (0-100) in <SCORE:XX> format and suggest corrections in a code block."
)


class VaultSettingsSource(PydanticBaseSettingsSource):
    """
    Custom Pydantic Settings Source that reads API keys from Vault.
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        # Required by the abstract base class; __call__ returns the full dict instead.
        return None, field_name, False  # pragma: no cover

    def __call__(self) -> dict[str, Any]:
        vault = VaultIntegrator()
        secrets: dict[str, Any] = {}

        # Config Field -> Vault Key
        mapping = {
            "llm_api_key": "LLM_API_KEY",
            "judge_api_key": "JUDGE0_API_KEY",
        }

        for field, key in mapping.items():
            val = vault.get_secret(key)
            if val:
                secrets[field] = val

        return secrets


class AmplifierConfig(BaseSettings):
    """
    Configuration for the review backend, the execution judge and the batch pipeline.
    """

    # Review backend (OpenAI-compatible chat completions endpoint)
    llm_api_url: str = "http://localhost:1234/v1/chat/completions"
    llm_model: str = "deepseek-coder-7b-instruct"
    llm_api_key: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2048
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    request_timeout: float = 120.0

    # Batch orchestration
    max_concurrency: int = Field(default=4, ge=1)
    duplicate_paths: Literal["disambiguate", "reject"] = "disambiguate"

    # Judge0 execution service
    judge_api_url: str = "https://judge0-ce.p.rapidapi.com"
    judge_api_host: str | None = "judge0-ce.p.rapidapi.com"
    judge_api_key: str | None = None
    default_language_id: int = 71  # Python 3

    # Polling
    poll_initial_delay: float = 1.0
    poll_interval: float = 1.0
    poll_backoff_factor: float = Field(default=1.0, ge=1.0)
    poll_max_interval: float = 10.0
    poll_max_attempts: int | None = Field(default=None, ge=1)

    enable_audit_logging: bool = True

    model_config = SettingsConfigDict(
        env_prefix="COREASON_AMPLIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

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
            VaultSettingsSource(settings_cls),
            file_secret_settings,
        )
