from __future__ import annotations

import os
from dataclasses import dataclass

from .types import AuthConfig, ModelConfig, ModelOptions

DEFAULT_MODEL = "claude-2.1"
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"


@dataclass(frozen=True)
class GatewaySettings:
    model_name: str = DEFAULT_MODEL
    upstream_url: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    api_key: str | None = None
    anthropic_version: str = DEFAULT_ANTHROPIC_VERSION
    timeout: float = 60.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "GatewaySettings":
        source = env if env is not None else os.environ
        temperature = source.get("LLM_DRIVER_TEMPERATURE")
        max_tokens = source.get("LLM_DRIVER_MAX_TOKENS")
        return cls(
            model_name=source.get("LLM_DRIVER_MODEL", DEFAULT_MODEL),
            upstream_url=source.get("LLM_DRIVER_UPSTREAM_URL") or None,
            temperature=float(temperature) if temperature else None,
            max_tokens=int(max_tokens) if max_tokens else None,
            api_key=source.get("ANTHROPIC_API_KEY") or None,
            anthropic_version=source.get("ANTHROPIC_VERSION", DEFAULT_ANTHROPIC_VERSION),
            timeout=float(source.get("LLM_DRIVER_TIMEOUT", "60")),
            log_level=source.get("LLM_DRIVER_LOG_LEVEL", "INFO").upper(),
        )

    def to_model_config(self) -> ModelConfig:
        return ModelConfig(
            name=self.model_name,
            options=ModelOptions(
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                upstream_url=self.upstream_url,
                provider_version=self.anthropic_version,
            ),
        )

    def to_auth_config(self) -> AuthConfig:
        if self.api_key is None:
            return AuthConfig()
        return AuthConfig(header_name="x-api-key", header_value=self.api_key)
