"""
Configuration management for the Sokohub product feed service.
"""

from typing import Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sokohub_feed.core.feed.models import FeedConfig


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Store identity
    site_name: str = Field(default="Sokohub Kenya")
    site_url: str = Field(default="https://sokohubkenya.com")
    currency_code: str = Field(default="KES")
    shipping_country: str = Field(default="KE")
    sale_timezone_offset: str = Field(default="+03:00")
    sale_window_days: int = Field(default=30)

    # Supabase backend
    supabase_url: str = Field(default="http://localhost:54321")
    supabase_key: str = Field(default="")
    supabase_storage_bucket: str = Field(default="product-images")
    supabase_timeout: float = Field(default=15.0)
    supabase_page_size: int = Field(default=1000)

    # Images
    placeholder_image_path: str = Field(default="/images/placeholder.png")
    max_additional_images: int = Field(default=10)

    # Description
    description_max_length: int = Field(default=5000)
    description_min_length: int = Field(default=120)

    # Cache and rate limiting
    feed_cache_ttl: int = Field(default=3600)
    rate_limit_max_requests: int = Field(default=10)
    rate_limit_window: int = Field(default=3600)
    rate_limit_max_keys: int = Field(default=10000)
    feed_state_backend: Literal["memory", "redis"] = Field(default="memory")
    redis_url: str = Field(default="redis://localhost:6379/0")
    # Honour X-Forwarded-For / X-Real-IP; disable when not behind a reverse proxy
    trust_proxy_headers: bool = Field(default=True)

    # Admin
    admin_api_key: Optional[str] = Field(default=None)

    log_level: str = Field(default="INFO")
    prerender_output_path: str = Field(default="build/feed.xml")

    def to_feed_config(self) -> FeedConfig:
        """Build the feed configuration consumed by the core generator."""
        site_url = self.site_url.rstrip("/")
        return FeedConfig(
            site_name=self.site_name,
            site_url=site_url,
            storage_base_url=self.supabase_url.rstrip("/"),
            storage_bucket=self.supabase_storage_bucket,
            placeholder_image_url=f"{site_url}/{self.placeholder_image_path.lstrip('/')}",
            currency=self.currency_code,
            shipping_country=self.shipping_country,
            sale_timezone_offset=self.sale_timezone_offset,
            sale_window_days=self.sale_window_days,
            max_additional_images=self.max_additional_images,
            description_max_length=self.description_max_length,
            description_min_length=self.description_min_length,
        )


_settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return _settings
