"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Data sources
    data_dir: Path = DEFAULT_DATA_DIR
    catalog_file: str = "fips.json"
    taxonomy_file: str = "categories.json"
    user_groups_file: str = "nested_all_user_groups.json"
    cache_enabled: bool = False

    # Listing
    page_size: int = 12
    facet_count_mode: Literal["filtered", "eligible"] = "filtered"

    # Exclusion policy
    excluded_parents: list[str] = [
        "End User Computing",
        "Corporate services",
        "Shared IT core services",
        "zBusiness Operations (do not use)",
        "Voice and Data Network",
        "IT for the IT department",
    ]
    excluded_parent_marker: str = "(PP)"
    excluded_status: str = "New"

    # Contacts
    contact_email_domain: str = "education.gov.uk"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def catalog_path(self) -> Path:
        """Path to the catalog records file."""
        return self.data_dir / self.catalog_file

    @property
    def taxonomy_path(self) -> Path:
        """Path to the taxonomy table file."""
        return self.data_dir / self.taxonomy_file

    @property
    def user_groups_path(self) -> Path:
        """Path to the nested user groups file."""
        return self.data_dir / self.user_groups_file


settings = Settings()
