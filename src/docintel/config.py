"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Documents
    data_dir: str = Field(default="./data", description="Directory scanned when none is given explicitly")

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_batch_size: int | None = Field(
        default=64,
        description="Texts per embedding request. Unset sends the whole corpus in one request.",
    )
    embedding_max_retries: int = 3
    embedding_retry_backoff_seconds: float = 1.0

    # Chunking
    chunk_size: int = 500
    chunk_overlap: int = 100

    # Ranking
    top_k: int = 5
    snippet_length: int = 100

    # Ingestion
    max_workers: int = Field(default=8, description="Upper bound on concurrent file tasks")
    ingest_timeout_seconds: float | None = Field(
        default=None,
        description="Deadline for extracting and chunking a whole directory. Unset waits indefinitely.",
    )
    cache_enabled: bool = Field(
        default=False,
        description="Reuse segments and vectors of unchanged files between queries in the same process.",
    )

    # Tools
    summary_max_chars: int = 20000

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton: import `settings` wherever needed.
settings = Settings()
