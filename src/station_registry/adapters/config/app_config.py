"""12-factor configuration adapter using environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ROUTING_API_SURFACES = ("routes", "distance_matrix")


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Routing API configuration
    google_maps_api_key: str = Field(
        default="", description="API key for the Google Routes and Distance Matrix APIs"
    )
    routing_api_surface: str = Field(
        default="routes",
        description="Driving-distance backend: 'routes' (one call per destination) "
        "or 'distance_matrix' (one call per request)",
    )
    routing_timeout_seconds: float = Field(
        default=15.0, description="Budget for one nearby-station distance lookup in seconds"
    )
    routing_min_delay_seconds: float = Field(
        default=0.0, description="Minimum delay between two outbound routing API calls"
    )
    routing_max_concurrency: int = Field(
        default=5, description="Maximum number of concurrent outbound routing API calls"
    )
    language: str = Field(default="fr", description="Language for routing API responses")

    # Distance cache and quota
    distance_cache_ttl_seconds: int = Field(
        default=300, description="Lifetime of a cached distance response in seconds"
    )
    max_destinations: int = Field(
        default=25, description="Maximum number of destinations per distance request"
    )
    search_radius_km: float = Field(
        default=20.0, description="Radius of the nearby-station search in kilometers"
    )
    maps_daily_limit: int = Field(default=100, description="Daily budget of map loads")
    routes_daily_limit: int = Field(default=566, description="Daily budget of routing API calls")

    # Station registry
    display_code_base: int = Field(
        default=1000, description="Display codes start right after this value"
    )

    # Rate limiting configuration
    rate_limit_per_minute: int = Field(
        default=60,
        description="Maximum number of distance requests allowed per IP address per minute",
    )

    @field_validator("routing_api_surface")
    @classmethod
    def validate_routing_api_surface(cls, v: str) -> str:
        """Validate the routing backend is either 'routes' or 'distance_matrix'."""
        if v.lower() not in ROUTING_API_SURFACES:
            raise ValueError("routing_api_surface must be either 'routes' or 'distance_matrix'")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is a standard logging level name."""
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v.upper()

    @field_validator("max_destinations", "routing_max_concurrency", "rate_limit_per_minute")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate limits that must be at least 1."""
        if v < 1:
            raise ValueError("value must be at least 1")
        return v
