from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Wordbook"
    environment: str = "dev"
    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 8000

    database_url: str = "sqlite:///./wordbook.db"

    # Base URL for backend API (used by the web front-end).
    # Unset means this same server, see backend_url().
    api_base_url: str | None = None

    # {word} is replaced by the URL-encoded word
    dictionary_api_url: str = "https://api.dictionaryapi.dev/api/v2/entries/en/{word}"

    # Gemini key from .env, only needed by /learn
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # None keeps httpx's own default timeout
    http_timeout_sec: float | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    def backend_url(self) -> str:
        if self.api_base_url:
            return self.api_base_url
        host = "127.0.0.1" if self.host in ("0.0.0.0", "::", "") else self.host
        return f"http://{host}:{self.port}"


def http_client_options(timeout_sec: float | None) -> dict:
    """Keyword arguments for httpx clients; only override the timeout when one is configured."""
    if timeout_sec is None:
        return {}
    return {"timeout": timeout_sec}


settings = Settings()
