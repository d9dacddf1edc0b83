"""
Converter configuration.

Centralized configuration management with environment variables
(prefix ``PSEUDOCONV_``). Library calls keep their documented defaults;
the command line front end reads its defaults from here.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Converter settings"""

    model_config = SettingsConfigDict(env_prefix="PSEUDOCONV_", extra="ignore")

    # Conversion defaults
    DEFAULT_METHOD: Literal["pattern", "tree", "hybrid"] = "hybrid"
    INDENT_SIZE: int = 4
    INCLUDE_COMMENTS: bool = False
    VALIDATE_OUTPUT: bool = True
    NEST_BLOCKS: bool = False

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: Literal["text", "json"] = "text"
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
