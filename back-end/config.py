from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration, read from the environment or a .env file."""

    # Required: the service refuses to start without a connection string
    mongo_uri: str
    port: int = Field(default=5000, ge=1, le=65535)
    database_name: str = "studentsDb"
    collection_name: str = "studentsReg"
    bcrypt_rounds: int = Field(default=10, ge=4, le=16)
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process. Raises if MONGO_URI is missing."""
    return Settings()
