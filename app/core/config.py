"""
Core configuration and settings for the Product Service
Following FastAPI best practices for configuration management
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields to be ignored
    )

    # Service information (SERVICE_NAME is required, it identifies the emitter of telemetry)
    service_name: str = Field(..., min_length=1)
    service_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=8082)
    host: str = Field(default="0.0.0.0")

    # Database configuration
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="productdb")
    seed_on_startup: bool = Field(default=True)

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL"""
        if self.mongodb_username and self.mongodb_password:
            return f"mongodb://{self.mongodb_username}:{self.mongodb_password}@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}?authSource=admin"
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: Optional[str] = Field(default=None)

    # Telemetry collector configuration
    telemetry_service_url: str = Field(default="http://localhost:8086")
    telemetry_enabled: bool = Field(default=True)
    telemetry_timeout_seconds: float = Field(default=5.0, gt=0)
    telemetry_buffer_size: int = Field(default=1000, ge=1)

    # Request headers
    trace_id_header: str = Field(default="X-Trace-ID")
    user_id_header: str = Field(default="X-User-ID")

    @property
    def telemetry_events_url(self) -> str:
        """Collector endpoint receiving event records"""
        return f"{self.telemetry_service_url.rstrip('/')}/api/telemetry/events"


# Global config instance
config = Config()
