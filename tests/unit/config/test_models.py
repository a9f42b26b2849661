"""Unit tests for configuration section models."""

from eventform.config.models import DataSourceConfig, FilterConfig, FormDefaults
from eventform.data.models import ResourceKey


class TestDataSourceConfig:
    def test_blank_urls_dropped(self) -> None:
        config = DataSourceConfig(urls={"programs": "  ", "periods": "https://x.org/p.json"})
        assert config.urls == {ResourceKey.PERIODS: "https://x.org/p.json"}

    def test_urls_keyed_by_resource(self) -> None:
        config = DataSourceConfig(urls={"colleges": "./colegios.json"})
        assert ResourceKey.COLLEGES in config.urls


class TestFilterConfig:
    def test_single_string_becomes_list(self) -> None:
        """A bare string in TOML is a one-element allow-list."""
        filters = FilterConfig(cities="Leticia", colleges="")
        assert filters.cities == ["Leticia"]
        assert filters.colleges == []

    def test_attendee_types_default(self) -> None:
        assert "Aspirante" in FilterConfig().attendee_types


class TestFormDefaults:
    def test_lead_defaults(self) -> None:
        defaults = FormDefaults()
        assert defaults.lead_source == "Landing Pages"
        assert defaults.request_origin == "web_to_lead_eventos"
        assert defaults.non_applicant_program == "NOAP"
