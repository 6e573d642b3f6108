"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application. The engine
functions themselves are pure and never read settings; only the HTTP
layer and upload checks do.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    DOCGEN_* environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(
        default="Lease Document Engine",
        description="Service name reported by the health endpoint.",
    )

    # Template uploads
    max_template_size_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted template upload size in bytes.",
    )
    allowed_template_mime_types: list[str] = Field(
        default=[DOCX_MIME_TYPE],
        description="MIME types accepted for template uploads.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_format: str = Field(
        default="console",
        description="Log renderer: 'console' or 'json'.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Optional directory for info.log and error.log files.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only the console and json renderers are supported."""
        v = v.lower()
        if v not in {"console", "json"}:
            raise ValueError(f"Unknown log format: {v}. Valid options: 'console', 'json'")
        return v

    def configure_logging(self) -> None:
        """Configure global structlog processing based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        renderer = (
            structlog.processors.JSONRenderer()
            if self.log_format == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                renderer,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
