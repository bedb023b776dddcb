from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Union


class Settings(BaseSettings):
    # Wordlist column naming the target column: a name or a 1-based position
    DEFAULT_GROUP_REF: Union[int, str] = 3
    REPORT_DIAGNOSTICS: bool = False
    LOG_LEVEL: str = "INFO"
    MAX_ROWS: int = 100_000

    @field_validator("DEFAULT_GROUP_REF", mode="before")
    @classmethod
    def _position_from_digits(cls, v):
        if isinstance(v, str) and v.strip().isdigit():
            return int(v)
        return v

    class Config:
        env_file = ".env"
        env_prefix = "WORDCLEAN_"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
