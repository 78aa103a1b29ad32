"""Configuration loading for the Business Directory service."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Application settings
    app_name: str = "Business Directory"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Elasticsearch settings
    elasticsearch_url: Optional[str] = Field(default=None, alias="ELASTICSEARCH_URL")
    es_host: str = Field(default="localhost", alias="ELASTICSEARCH_HOST")
    es_port: int = Field(default=9200, alias="ELASTICSEARCH_PORT")
    es_scheme: str = Field(default="http", alias="ELASTICSEARCH_SCHEME")
    es_username: Optional[str] = Field(default=None, alias="ELASTICSEARCH_USERNAME")
    es_password: Optional[str] = Field(default=None, alias="ELASTICSEARCH_PASSWORD")
    es_api_key: Optional[str] = Field(default=None, alias="ELASTICSEARCH_API_KEY")
    es_cloud_id: Optional[str] = Field(default=None, alias="ELASTICSEARCH_CLOUD_ID")
    es_verify_certs: bool = Field(default=True, alias="ELASTICSEARCH_VERIFY_CERTS")
    es_request_timeout: float = Field(default=10.0, alias="ELASTICSEARCH_REQUEST_TIMEOUT")

    # Index names
    businesses_index: str = "businesses"
    reviews_index: str = "reviews"
    complaints_index: str = "complaints"

    # Statistics settings
    rating_precision: int = Field(default=2, ge=0, le=6)  # decimals kept on average_rating
    max_related_documents: int = Field(default=10000, ge=1)  # default page size for find
    recompute_on_review_exit: bool = False

    @property
    def es_url(self) -> str:
        """Get the full Elasticsearch URL."""
        return f"{self.es_scheme}://{self.es_host}:{self.es_port}"

    @property
    def collection_indices(self) -> dict[str, str]:
        """Map logical collection names to Elasticsearch index names."""
        return {
            "businesses": self.businesses_index,
            "reviews": self.reviews_index,
            "complaints": self.complaints_index,
        }

    @classmethod
    def load_from_yaml(cls, yaml_path: str = "config/config.yaml") -> "Settings":
        """Load settings from YAML config file, with env overrides."""
        config_data = {}

        yaml_file = Path(yaml_path)
        if yaml_file.exists():
            with open(yaml_file, "r") as f:
                yaml_config = yaml.safe_load(f) or {}

            # Flatten nested YAML structure
            if "elasticsearch" in yaml_config:
                es_config = yaml_config["elasticsearch"]
                config_data["es_host"] = es_config.get("host", "localhost")
                config_data["es_port"] = es_config.get("port", 9200)
                config_data["es_scheme"] = es_config.get("scheme", "http")
                config_data["es_username"] = es_config.get("username")
                config_data["es_password"] = es_config.get("password")
                config_data["es_api_key"] = es_config.get("api_key")
                config_data["es_cloud_id"] = es_config.get("cloud_id")
                config_data["es_verify_certs"] = es_config.get("verify_certs", True)
                config_data["es_request_timeout"] = es_config.get("request_timeout")

            if "indices" in yaml_config:
                indices = yaml_config["indices"]
                config_data["businesses_index"] = indices.get("businesses", "businesses")
                config_data["reviews_index"] = indices.get("reviews", "reviews")
                config_data["complaints_index"] = indices.get("complaints", "complaints")

            if "app" in yaml_config:
                app_config = yaml_config["app"]
                config_data["app_name"] = app_config.get("name", "Business Directory")
                config_data["debug"] = app_config.get("debug", False)
                config_data["log_level"] = app_config.get("log_level")

            if "statistics" in yaml_config:
                statistics = yaml_config["statistics"]
                config_data["rating_precision"] = statistics.get("rating_precision")
                config_data["max_related_documents"] = statistics.get("max_related_documents")
                config_data["recompute_on_review_exit"] = statistics.get("recompute_on_review_exit")

        # Filter out None values
        config_data = {k: v for k, v in config_data.items() if v is not None}

        # Init kwargs outrank the environment, so drop YAML values an env var sets
        for name, field_info in cls.model_fields.items():
            if field_info.alias and field_info.alias in os.environ:
                config_data.pop(name, None)

        return cls(**config_data)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.load_from_yaml()
