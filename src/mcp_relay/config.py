"""Configuration module for mcp-relay using pydantic-settings."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = """
You are "my-chatbot". Be concise and helpful.
When a query requires Notion or timezone info, call MCP via mcp_call.
Summarize tool outputs clearly; include key IDs/links when useful.
"""


class RelaySettings(BaseSettings):
    """Main configuration settings for mcp-relay.

    All settings can be overridden via environment variables with the RELAY_
    prefix. For example, RELAY_MCP_URL will override the mcp_url setting.
    The OpenAI key, model and port also accept the conventional unprefixed
    names (OPENAI_API_KEY, OPENAI_MODEL, PORT).
    """

    # Server
    host: str = "127.0.0.1"
    port: int = Field(
        default=3001,
        validation_alias=AliasChoices("port", "RELAY_PORT", "PORT"),
    )

    # Chat model
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "openai_api_key", "RELAY_OPENAI_API_KEY", "OPENAI_API_KEY"
        ),
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices(
            "openai_model", "RELAY_OPENAI_MODEL", "OPENAI_MODEL"
        ),
    )
    openai_base_url: str | None = None
    temperature: float = 0.2
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # MCP tool server
    mcp_url: str = "http://localhost:9000/mcp"
    consumer_tag: str = "my-chatbot"
    tools_ttl_seconds: float = 60.0

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def api_key_configured(self) -> bool:
        """Whether an API key for the chat model is available."""
        return bool(self.openai_api_key)
