"""Server and logging configuration settings."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServerSettings(BaseModel):
    """Listener configuration for the uvicorn server."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        default="0.0.0.0",
        min_length=1,
        description="Interface the server binds to",
    )
    port: int = Field(
        default=3005,
        ge=1,
        le=65535,
        description="Port the server listens on",
    )


class LoggingSettings(BaseModel):
    """Centralized logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR or CRITICAL",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console output",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate and normalize the log level."""
        upper_v = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v
