"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Ingest settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    foods_table: str = "foods"
    dictionaries_table: str = "dictionaries"
    dictionary_namespace: str = "gnutdata"
    dictionary_page_size: int = Field(default=500, gt=0)
    data_dir: Path = Path("data/fndds")
    source_tag: str = "FNDDS"
    foods_file: str = "food.csv"
    servings_file: str = "food_portion.csv"
    nutrients_file: str = "food_nutrient.csv"
    input_foods_file: str = "input_food.csv"
    csv_delimiter: str = ","
    skip_header: bool = True
    serialize_flushes: bool = True
    progress_interval: int = 10000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
