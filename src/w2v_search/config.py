from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    vectors_path: str = "data/vectors.bin"
    vectors_binary: Optional[bool] = None  # None: pick format from suffix
    vectors_encoding: str = "utf-8"
    vocab_limit: Optional[int] = Field(default=None, ge=0)

    default_top_n: int = Field(default=10, ge=0)
    max_top_n: int = Field(default=1000, ge=1)

    # Load the model during startup instead of on the first request
    preload_vectors: bool = True

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_prefix="W2V_",
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
