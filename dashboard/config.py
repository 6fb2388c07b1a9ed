#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exam Command Centre - API Configuration
Settings of the backend persistence service for each environment

Version: 1.0.0
"""

import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class DashboardSettings(BaseSettings):
    """Backend settings, read from the environment and ``.env``"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== GENERAL =====

    APP_NAME: str = Field(
        default="Exam Command Centre API",
        description="Application name"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="API version"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment (development/production/testing/staging)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Debug mode"
    )

    # ===== NETWORK =====

    HOST: str = Field(
        default="0.0.0.0",
        description="Bind host"
    )

    PORT: int = Field(
        default=3000,
        description="Bind port"
    )

    API_PREFIX: str = Field(
        default="/api",
        description="Prefix of the task and state routes"
    )

    MAX_BODY_BYTES: int = Field(
        default=256 * 1024,
        description="Largest accepted request body"
    )

    # ===== CORS =====

    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated allow-list of origins, '*' allows all"
    )

    # ===== STORAGE =====

    DB_PATH: Path = Field(
        default=Path("./data.sqlite"),
        description="SQLite database file"
    )

    # ===== LOGGING =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log line format"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log date format"
    )

    LOGS_DIR: Optional[Path] = Field(
        default=None,
        description="Directory of the rotating log file, console only when unset"
    )

    # ===== API DOCS =====

    DOCS_URL: Optional[str] = Field(
        default="/api/docs",
        description="Swagger UI URL (None disables it)"
    )

    OPENAPI_URL: Optional[str] = Field(
        default="/api/openapi.json",
        description="OpenAPI schema URL (None disables it)"
    )

    # ===== VALIDATORS =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        allowed_envs = ['development', 'production', 'testing', 'staging']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator('PORT')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator('API_PREFIX')
    @classmethod
    def validate_api_prefix(cls, v):
        v = v.strip().strip("/")
        return f"/{v}" if v else ""

    @model_validator(mode="after")
    def validate_production_settings(self):
        if self.ENVIRONMENT == "production":
            # Production never exposes debug output or the API docs
            self.DEBUG = False
            self.DOCS_URL = None
            self.OPENAPI_URL = None
        return self

    # ===== HELPERS =====

    @property
    def allowed_origins(self) -> List[str]:
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return origins or ["*"]

    @property
    def allow_all_origins(self) -> bool:
        return "*" in self.allowed_origins

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def setup_logging(self) -> None:
        """Configure the root logger"""
        handlers: List[logging.Handler] = [logging.StreamHandler()]

        if self.LOGS_DIR is not None:
            self.LOGS_DIR.mkdir(parents=True, exist_ok=True)
            handlers.append(
                logging.handlers.RotatingFileHandler(
                    self.LOGS_DIR / "api.log",
                    maxBytes=10 * 1024 * 1024,
                    backupCount=5,
                    encoding="utf-8"
                )
            )

        logging.basicConfig(
            level=getattr(logging, self.LOG_LEVEL),
            format=self.LOG_FORMAT,
            datefmt=self.LOG_DATE_FORMAT,
            handlers=handlers,
            force=True
        )

        if not self.DEBUG:
            logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

def get_settings() -> DashboardSettings:
    return DashboardSettings()
