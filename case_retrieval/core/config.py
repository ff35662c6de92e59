from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    EMBEDDING_PROVIDER: str = "openai"  # "openai" | "cohere"
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-ada-002"
    COHERE_API_KEY: str | None = None
    COHERE_EMBEDDING_MODEL: str = "embed-english-v3.0"
    EMBEDDING_DIM: int | None = None  # enforce a fixed dimension when set

    EMBED_BATCH_SIZE: int = 96
    EMBED_TIMEOUT: float = 10.0
    EMBED_MAX_RETRIES: int = 3
    EMBED_BACKOFF_BASE: float = 0.5
    EMBED_BACKOFF_MAX: float = 8.0

    INDEX_KIND: str = "brute"  # "brute" | "brute_pure"
    DEFAULT_TOP_K: int = 3
    SEED_SAMPLE_CORPUS: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
