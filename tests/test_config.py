"""Tests for application settings."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from carcass_watch.config import Settings, get_settings
from carcass_watch.schemas import ExportFormat, QualityGrade


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test away from any local .env file."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()


class TestDefaults:
    """Out-of-the-box configuration."""

    def test_query_defaults(self) -> None:
        s = Settings()
        assert s.taxon_name == "Morus bassanus"
        assert s.quality_grade is QualityGrade.RESEARCH
        assert s.max_results == 2000

    def test_filter_defaults(self) -> None:
        s = Settings()
        assert "dead" in s.include_keywords
        assert "skeleton" in s.exclude_keywords
        assert s.cutoff_date == date(2021, 10, 1)

    def test_output_defaults(self) -> None:
        s = Settings()
        assert s.export_formats == [ExportFormat.CSV, ExportFormat.GEOJSON]
        assert s.crs == "EPSG:4326"

    def test_keyword_rule(self) -> None:
        rule = Settings(include_keywords=["Dead"], exclude_keywords=[]).keyword_rule()
        assert rule.include == frozenset({"dead"})
        assert rule.exclude == frozenset()
        assert rule.fields == ("tag_list", "description")


class TestEnvironment:
    """Environment variable overrides."""

    def test_scalar_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CARCASS_WATCH_COUNTRY_NAME", "Ireland")
        monkeypatch.setenv("CARCASS_WATCH_CUTOFF_DATE", "2022-03-01")
        s = Settings()
        assert s.country_name == "Ireland"
        assert s.cutoff_date == date(2022, 3, 1)

    def test_list_override_as_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CARCASS_WATCH_EXPORT_FORMATS", '["gpkg"]')
        assert Settings().export_formats == [ExportFormat.GPKG]

    def test_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("CARCASS_WATCH_PLACE_ID=10\n", encoding="utf-8")
        assert Settings().place_id == 10

    def test_max_results_bounded(self) -> None:
        with pytest.raises(ValidationError):
            Settings(max_results=0)
        with pytest.raises(ValidationError):
            Settings(max_results=50_000)

    def test_get_settings_cached(self) -> None:
        assert get_settings() is get_settings()
