from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    data_dir: Path = Path("./data")
    catalog_filename: str = "photos.json"
    presets_filename: str = "presets.yaml"

    similar_limit: int = 6
    recommendation_limit: int = 10
    trending_limit: int = 12
    category_limit: int = 8
    highlight_limit: int = 10
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PQE_",
        env_file_encoding="utf-8",
    )

    @field_validator(
        "similar_limit",
        "recommendation_limit",
        "trending_limit",
        "category_limit",
        "highlight_limit",
    )
    @classmethod
    def limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("result limits must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_filename

    @property
    def presets_path(self) -> Path:
        return self.data_dir / self.presets_filename
