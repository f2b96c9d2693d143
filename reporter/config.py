"""Configuration management for the Crisp Bug Reporter."""
import os
from dataclasses import dataclass, field

from reporter.services.crisp_client import CRISP_API_URL


@dataclass
class Config:
    """Service configuration loaded from environment variables."""

    # Crisp
    crisp_identifier: str = field(default_factory=lambda: os.getenv("CRISP_TOKEN_IDENTIFIER", ""))
    crisp_key: str = field(default_factory=lambda: os.getenv("CRISP_TOKEN_KEY", ""))
    crisp_plugin_id: str = field(default_factory=lambda: os.getenv("CRISP_PLUGIN_ID", ""))
    crisp_api_url: str = field(default_factory=lambda: os.getenv("CRISP_API_URL", CRISP_API_URL))

    # LLM
    llm_provider: str = field(default_factory=lambda: os.getenv("LLM_PROVIDER", "anthropic"))
    anthropic_api_key: str = field(default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""))
    anthropic_model: str = field(
        default_factory=lambda: os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
    )
    openai_api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o"))

    # GitHub
    github_token: str = field(default_factory=lambda: os.getenv("GITHUB_TOKEN", ""))
    github_repo: str = field(default_factory=lambda: os.getenv("GITHUB_REPO", ""))

    # HTTP server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))

    # Upper bound in seconds for each remote call
    request_timeout: int = field(default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "60")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def validate(self) -> list[str]:
        """Validate required configuration. Returns list of errors."""
        errors = []
        if not self.crisp_identifier or not self.crisp_key:
            errors.append("CRISP_TOKEN_IDENTIFIER and CRISP_TOKEN_KEY are required")
        if not self.crisp_plugin_id:
            errors.append("CRISP_PLUGIN_ID is required")
        if self.llm_provider not in ("anthropic", "openai"):
            errors.append("LLM_PROVIDER must be 'anthropic' or 'openai'")
        elif self.llm_provider == "anthropic" and not self.anthropic_api_key:
            errors.append("ANTHROPIC_API_KEY is required when LLM_PROVIDER is anthropic")
        elif self.llm_provider == "openai" and not self.openai_api_key:
            errors.append("OPENAI_API_KEY is required when LLM_PROVIDER is openai")
        if not self.github_token:
            errors.append("GITHUB_TOKEN is required")
        if self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")
        return errors
