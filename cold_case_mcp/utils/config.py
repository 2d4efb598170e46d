"""Service configuration definition."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceConfig(BaseSettings):
    """
    Settings for the archive terminal and its MCP server, read from
    environment variables.
    """

    # .env is loaded explicitly by main.py through load_dotenv.
    model_config = SettingsConfigDict(extra="ignore")

    # MCP transport ("stdio", "sse", "streamable-http") and bind address.
    MCP_TRANSPORT: str = "stdio"
    MCP_HOST: str = "0.0.0.0"
    MCP_PORT: int = 8660

    # Assistant collaborator. Without a key, `ask` reports an error entry.
    ANTHROPIC_API_KEY: str | None = None
    ASSISTANT_MODEL: str = "claude-haiku-4-5-20251001"
    ASSISTANT_MAX_TOKENS: int = 1024
    ASSISTANT_TIMEOUT_SECONDS: float = 30.0
    ASSISTANT_CONTEXT_MAX_CHARS: int = 20000

    # Simulated processing time of a successful decrypt.
    DECRYPT_DELAY_SECONDS: float = 0.8
