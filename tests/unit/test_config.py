"""
Unit Tests - Configuration
"""
import json

import pytest
from pydantic import ValidationError

from staff_analytics.config import (
    SiteProperty,
    find_site,
    load_alias_map,
    load_default_alias_map,
    normalize_property_id,
    parse_sites,
)
from staff_analytics.config.settings import ReportingSettings, Settings
from staff_analytics.exceptions import ConfigurationError


class TestParseSites:
    """Tests for site list parsing"""

    def test_colon_format(self):
        assert parse_sites("blog:123456,shop:789012") == [
            SiteProperty("blog", "123456"),
            SiteProperty("shop", "789012"),
        ]

    def test_parenthesized_format(self):
        assert parse_sites("blog(123456)") == [SiteProperty("blog", "123456")]

    def test_properties_prefix(self):
        assert parse_sites("news: properties/345678") == [SiteProperty("news", "345678")]

    def test_blank_entries_skipped(self):
        assert parse_sites(" blog:1 , ,shop:2,") == [SiteProperty("blog", "1"), SiteProperty("shop", "2")]

    def test_label_without_id(self):
        assert parse_sites("987654") == [SiteProperty("987654", "987654")]

    def test_empty(self):
        assert parse_sites(None) == []
        assert parse_sites("") == []

    def test_missing_label(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_sites(":123456")

        assert isinstance(exc_info.value, ValueError)
        assert "label:propertyId" in exc_info.value.message

    def test_find_site(self):
        sites = parse_sites("blog:123456,shop:789012")

        assert find_site(sites, "properties/789012").label == "shop"
        assert find_site(sites, "000") is None


class TestNormalizePropertyId:
    """Tests for property id normalization"""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("123456", "123456"),
            ("properties/123456", "123456"),
            (" properties/ 123456 ", "123456"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_property_id(raw) == expected


class TestAliasMap:
    """Tests for alias map loading"""

    def test_valid_map(self):
        raw = json.dumps({"properties/111": {"bebe": "linh"}, "222": {}})

        assert load_alias_map(raw) == {"111": {"bebe": "linh"}, "222": {}}

    def test_malformed_json_means_no_aliases(self):
        assert load_alias_map("{not json") == {}

    def test_non_object_document(self):
        assert load_alias_map("[1, 2]") == {}

    def test_malformed_entry_only_affects_its_source(self):
        raw = json.dumps({"111": ["bebe"], "222": {"beo": "nam", "bad": None}})

        assert load_alias_map(raw) == {"222": {"beo": "nam"}}

    def test_default_alias_map(self):
        raw = json.dumps({"properties/111": "bebe", "222": "", "333": 5})

        assert load_default_alias_map(raw) == {"111": "bebe"}


class TestReportingSettings:
    """Tests for ReportingSettings validation"""

    def test_defaults(self):
        settings = ReportingSettings()

        assert settings.page_size == 100000
        assert settings.default_mode == "alias"
        assert settings.uses_title_aliases("properties/495153878")

    def test_parsed_views(self, reporting_settings):
        assert [site.id for site in reporting_settings.sites] == ["111", "222", "333", "444"]
        assert reporting_settings.alias_map["333"] == {"bebe": "linh", "be": "bao"}
        assert reporting_settings.default_alias_map == {"222": "linh"}
        assert not reporting_settings.uses_title_aliases("111")

    def test_mode_is_normalized(self):
        assert ReportingSettings(DEFAULT_MODE="EMPLOYEE").default_mode == "employee"

    def test_invalid_mode(self):
        with pytest.raises(ValidationError):
            ReportingSettings(DEFAULT_MODE="team")

    def test_unlabeled_site_rejected(self):
        with pytest.raises(ValidationError):
            ReportingSettings(GA4_SITES="blog:1,:2")

    def test_non_positive_page_size(self):
        with pytest.raises(ValidationError):
            ReportingSettings(REPORT_PAGE_SIZE=0)


class TestSettings:
    """Tests for application settings"""

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(app_env="qa")

    def test_environment_flags(self, test_settings):
        assert test_settings.app_env == "testing"
        assert not test_settings.is_production
        assert test_settings.reporting.sites[0].label == "alpha"
