"""
Staff Analytics Leaderboards
Centralized Configuration Management

This module provides configuration management using Pydantic settings with
environment variable support, validation, and type safety.
"""

from functools import cached_property, lru_cache
from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .aliases import AliasMap, load_alias_map, load_default_alias_map
from .sites import SiteProperty, normalize_property_id, parse_sites


class ReportingSettings(BaseSettings):
    """Reporting API sources, identity modes and alias configuration"""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", populate_by_name=True)

    sites_raw: Optional[str] = Field(default=None, alias="GA4_SITES", description="label:propertyId,label2:propertyId2")
    employee_dimension: str = Field(
        default="customUser:employee_id",
        alias="GA4_EMPLOYEE_DIMENSION",
        description="Dimension holding the employee identifier",
    )
    alias_map_raw: Optional[str] = Field(default=None, alias="ALIAS_MAP", description="JSON propertyId -> alias -> employee")
    default_alias_map_raw: Optional[str] = Field(
        default=None,
        alias="DEFAULT_ALIAS_MAP",
        description="JSON propertyId -> default alias",
    )
    default_mode: str = Field(default="alias", alias="DEFAULT_MODE", description="Identity mode: alias or employee")
    title_alias_properties: List[str] = Field(
        default=["495153878"],
        alias="TITLE_ALIAS_PROPERTIES",
        description="Properties whose aliases live in page titles instead of paths",
    )
    page_size: int = Field(default=100000, alias="REPORT_PAGE_SIZE", description="Rows requested per report page")
    default_start_date: str = Field(default="30daysAgo", alias="DEFAULT_START_DATE", description="Default range start")
    default_end_date: str = Field(default="today", alias="DEFAULT_END_DATE", description="Default range end")

    @field_validator("default_mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        """Validate default identity mode"""
        allowed = ["alias", "employee"]
        if v.lower() not in allowed:
            raise ValueError(f"DEFAULT_MODE must be one of: {allowed}")
        return v.lower()

    @field_validator("sites_raw")
    @classmethod
    def validate_sites(cls, v: Optional[str]) -> Optional[str]:
        """Reject site lists with unlabeled entries at startup"""
        parse_sites(v)
        return v

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("REPORT_PAGE_SIZE must be positive")
        return v

    @cached_property
    def sites(self) -> List[SiteProperty]:
        """Configured sources, in declaration order"""
        return parse_sites(self.sites_raw)

    @cached_property
    def alias_map(self) -> AliasMap:
        """Per-source alias tables; malformed input yields no aliases"""
        return load_alias_map(self.alias_map_raw)

    @cached_property
    def default_alias_map(self) -> Dict[str, str]:
        return load_default_alias_map(self.default_alias_map_raw)

    def uses_title_aliases(self, property_id: str) -> bool:
        """Check whether a source embeds aliases in page titles"""
        normalized = normalize_property_id(property_id)
        return any(normalize_property_id(p) == normalized for p in self.title_alias_properties)


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", populate_by_name=True)

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class SecuritySettings(BaseSettings):
    """CORS Configuration"""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", populate_by_name=True)

    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        alias="CORS_ORIGINS",
        description="Allowed CORS origins",
    )


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="staff-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=3000, alias="PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
