"""Observability configuration."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ObservabilityConfig(BaseModel):
    """Logging and metrics settings."""

    log_level: LogLevel = Field(default="INFO", description="Minimum log level")
    log_format: Literal["json", "console"] = Field(
        default="json", description="Log renderer"
    )
    redact_pii: bool = Field(default=True, description="Redact PII in logs")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")
