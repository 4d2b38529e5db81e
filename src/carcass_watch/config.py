"""
Application settings.

Values come from (highest priority first) environment variables prefixed with
``CARCASS_WATCH_``, a local ``.env`` file, then the defaults below.  List and
mapping fields are read from the environment as JSON, e.g.::

    CARCASS_WATCH_INCLUDE_KEYWORDS='["dead", "carcass"]'
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from carcass_watch.schemas import ColumnMapping, ExportFormat, KeywordRule, QualityGrade

#: Natural Earth 1:50m admin-0 countries (zipped shapefile, WGS84).
NATURAL_EARTH_COUNTRIES = (
    "https://naciscdn.org/naturalearth/50m/cultural/ne_50m_admin_0_countries.zip"
)


class Settings(BaseSettings):
    """Runtime configuration for the fetch/build pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="CARCASS_WATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "carcass-watch"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    serve_port: int = 8000

    # --- Observation query ---
    taxon_name: str = "Morus bassanus"
    place_id: int = 6857  # United Kingdom
    quality_grade: QualityGrade = QualityGrade.RESEARCH
    max_results: int = Field(default=2000, gt=0, le=10_000)
    snapshot_ttl_hours: float = 24.0

    # --- Lexical filter ---
    include_keywords: list[str] = Field(
        default_factory=lambda: ["dead", "carcass", "deceased", "corpse", "died"]
    )
    exclude_keywords: list[str] = Field(default_factory=lambda: ["skeleton", "skull", "bones"])
    text_fields: list[str] = Field(default_factory=lambda: ["tag_list", "description"])
    cutoff_date: date = date(2021, 10, 1)

    # --- Geometry ---
    crs: str = "EPSG:4326"
    observation_columns: ColumnMapping = ColumnMapping()
    colony_columns: ColumnMapping = ColumnMapping()
    outbreak_columns: ColumnMapping = ColumnMapping()

    # --- Reference data ---
    colonies_path: Path = Path("data/reference/colonies.csv")
    outbreaks_path: Path = Path("data/reference/outbreaks.csv")
    boundary_source: str = NATURAL_EARTH_COUNTRIES
    boundary_name_column: str = "ADMIN"
    country_name: str = "United Kingdom"

    # --- Output ---
    data_dir: Path = Path("data")
    output_dir: Path = Path("output")
    export_formats: list[ExportFormat] = Field(
        default_factory=lambda: [ExportFormat.CSV, ExportFormat.GEOJSON]
    )
    map_title: str = "Reported gannet carcasses, colonies and outbreak sites"

    def keyword_rule(self) -> KeywordRule:
        """Build the lexical filter rule table from the keyword settings."""
        return KeywordRule(
            include=self.include_keywords,
            exclude=self.exclude_keywords,
            fields=tuple(self.text_fields),
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (read once)."""
    return Settings()
