from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    app_env: str = "development"
    port: int = 3001
    cors_origin: str = "http://localhost:3000"
    max_request_bytes: int = 10 * 1024 * 1024

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "json" for production

    # Outbound HTTP (Solana RPC, Bags.fm)
    http_timeout: float = 30.0

    # Workflow limits
    max_workflow_nodes: int = 100
    max_workflow_edges: int = 200
    max_workflow_name_length: int = 100
    max_description_length: int = 500

    # Storage: "memory" keeps records in-process, "sqlite" persists through SQLModel
    workflow_store: str = "memory"
    database_url: str = "sqlite:///./data/workflows.db"

    # Bags.fm
    bags_api_base: str = "https://public-api-v2.bags.fm/api/v1"

    # AI completion
    ia_provider: str = "mock"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_suggest_model: str = "gpt-4o-mini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-pro"

    @field_validator("app_env")
    @classmethod
    def _check_env(cls, v: str) -> str:
        if v not in ("development", "production", "test"):
            raise ValueError("Invalid APP_ENV")
        return v

    @field_validator("port")
    @classmethod
    def _check_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("Invalid port number")
        return v

    @field_validator("workflow_store")
    @classmethod
    def _check_store(cls, v: str) -> str:
        v = v.lower()
        if v not in ("memory", "sqlite"):
            raise ValueError("WORKFLOW_STORE must be 'memory' or 'sqlite'")
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]


settings = Settings()  # reads from env
