"""Application configuration and settings management."""

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PITSTOP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Pitstop Workshop Discovery"

    # Reverse geocoding (coordinates -> address text)
    reverse_geocoder: str = Field(
        default="nominatim",
        description="Name of the reverse geocoding provider to use.",
    )
    nominatim_url: str = Field(
        default="https://nominatim.openstreetmap.org/reverse",
        description="Nominatim reverse geocoding endpoint.",
    )
    nominatim_user_agent: str = Field(
        default="pitstop-workshop-discovery",
        description="User-Agent header required by the Nominatim usage policy.",
    )

    # Forward geocoding (address text -> coordinates)
    forward_geocoder: str = Field(
        default="trueway",
        description="Name of the forward geocoding provider to use.",
    )
    trueway_url: str = Field(
        default="https://trueway-geocoding.p.rapidapi.com/Geocode",
        description="TrueWay geocoding endpoint (RapidAPI).",
    )
    trueway_api_key: Optional[str] = Field(default=None, description="RapidAPI key for TrueWay.")
    trueway_api_host: str = Field(default="trueway-geocoding.p.rapidapi.com")

    geocoding_timeout_seconds: float = Field(default=10.0, gt=0.0)
    default_search_radius_km: float = Field(default=10.0, gt=0.0)

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    customers_table: str = "customers"
    providers_table: str = "providers"
    pricing_rules_table: str = "pricing_rules"

    @field_validator("reverse_geocoder", "forward_geocoder", mode="before")
    @classmethod
    def _normalize_provider_name(cls, value: Any) -> str:
        return str(value).strip().lower()


settings = Settings()
