"""
scrollfeed settings
Loads and validates settings from settings.yml using Pydantic
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("ScrollFeed.Settings")


class ScrollSettings(BaseModel):
    """When to request more rows"""
    threshold_rows: Optional[int] = Field(
        default=None,
        ge=0,
        description="Rows left below the viewport that trigger a fetch; overrides threshold_px"
    )
    threshold_px: float = Field(
        default=1000,
        ge=0,
        description="Pixels left below the viewport that trigger a fetch"
    )
    row_css_class: Optional[str] = Field(
        default=None,
        description="CSS class marking the children that count as rows"
    )

    @field_validator('row_css_class')
    @classmethod
    def validate_row_css_class(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank class name as unset"""
        if v is not None and not v.strip():
            return None
        return v


class DataSourceSettings(BaseModel):
    """Where rows are fetched from"""
    fetch_url: str = Field(
        default="http://localhost:3000/fetchrows",
        description="URL receiving POST {rowIndex, ...filters}"
    )
    request_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds before a request is abandoned; None waits forever"
    )

    @field_validator('fetch_url')
    @classmethod
    def validate_fetch_url(cls, v: str) -> str:
        """Only http(s) endpoints are supported"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("fetch_url must start with http:// or https://")
        return v


class Settings(BaseModel):
    """Main settings model"""
    scroll: ScrollSettings = Field(default_factory=ScrollSettings)
    data_source: DataSourceSettings = Field(default_factory=DataSourceSettings)


class SettingsManager:
    """Manages loading and accessing settings"""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager

        Args:
            config_path: Path to settings.yml file. Defaults to ./settings.yml
        """
        if config_path is None:
            config_path = Path("settings.yml")

        self.config_path = Path(config_path)
        self.settings = self._load_settings()

    def _load_settings(self) -> Settings:
        """Load and validate settings from YAML file"""
        if not self.config_path.exists():
            logger.info(f"Settings file not found at {self.config_path}, using defaults")
            return Settings()

        try:
            with open(self.config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(f"Error parsing settings YAML: {e}. Using default settings")
            return Settings()

        if config_data is None:
            logger.info("Settings file is empty, using defaults")
            return Settings()

        settings = Settings(**config_data)
        logger.info(f"Loaded settings from {self.config_path}")
        return settings

    def reload(self):
        """Reload settings from file"""
        self.settings = self._load_settings()

    @property
    def threshold_rows(self) -> Optional[int]:
        return self.settings.scroll.threshold_rows

    @property
    def threshold_px(self) -> float:
        return self.settings.scroll.threshold_px

    @property
    def fetch_url(self) -> str:
        return self.settings.data_source.fetch_url
