"""Configuration for the snippet code graph builder."""

from __future__ import annotations

from functools import lru_cache
from typing import Set

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SNIPPET_GRAPH_", case_sensitive=False)

    log_level: str = Field(default="INFO")
    max_body_depth: int = Field(default=64, ge=1)
    excluded_headers: str = Field(default="Host")

    def excluded_header_names(self) -> Set[str]:
        return {item.strip().lower() for item in self.excluded_headers.split(",") if item.strip()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
