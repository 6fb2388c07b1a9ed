#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exam Command Centre - Client Configuration
Configuration of the study client (local store, backend API, logging)

Version: 1.0.0
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import pytz

class Environment(Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"

class LogLevel(Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class ConfigError(ValueError):
    """Invalid configuration"""
    pass

@dataclass
class StorageConfig:
    """Local persistent store"""
    path: Path
    max_bytes: Optional[int] = None

@dataclass
class ApiConfig:
    """Optional backend"""
    base_url: Optional[str] = None
    api_prefix: str = "/api"
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

@dataclass
class LoggingConfig:
    """Logging"""
    level: LogLevel = LogLevel.INFO
    log_dir: Optional[Path] = Path("logs")
    to_file: bool = True

    @property
    def log_file(self) -> Optional[Path]:
        if not self.to_file or self.log_dir is None:
            return None
        return self.log_dir / "exam_centre.log"

class AppConfig:
    """Main client configuration, read from environment variables"""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        self._env = os.environ if env is None else env
        self._load_config()
        self._validate_config()

    def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._env.get(key)
        return value if value not in (None, "") else default

    def _get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self._get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"{key} must be an integer, got {value!r}")

    def _get_float(self, key: str, default: float) -> float:
        value = self._get(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            raise ConfigError(f"{key} must be a number, got {value!r}")

    def _load_config(self):
        """Load configuration from the environment"""
        try:
            self.environment = Environment(self._get('ENVIRONMENT', 'development').lower())
        except ValueError:
            raise ConfigError(f"ENVIRONMENT must be one of {[e.value for e in Environment]}")

        self.storage = StorageConfig(
            path=Path(self._get('ECC_STORE_PATH', 'data/local_store.json')),
            max_bytes=self._get_int('ECC_STORE_MAX_BYTES'),
        )

        self.api = ApiConfig(
            base_url=self._get('ECC_API_URL'),
            api_prefix=self._get('ECC_API_PREFIX', '/api'),
            timeout=self._get_float('ECC_API_TIMEOUT', 10.0),
        )

        try:
            level = LogLevel(self._get('LOG_LEVEL', 'INFO').upper())
        except ValueError:
            raise ConfigError(f"LOG_LEVEL must be one of {[l.value for l in LogLevel]}")
        self.logging = LoggingConfig(
            level=level,
            log_dir=Path(self._get('LOG_DIR', 'logs')),
            to_file=self._get('LOG_TO_FILE', 'true').lower() == 'true',
        )

        self.timezone = self._get('ECC_TIMEZONE')

    def _validate_config(self):
        """Validate configuration"""
        errors = []

        if self.storage.max_bytes is not None and self.storage.max_bytes <= 0:
            errors.append("ECC_STORE_MAX_BYTES must be positive")

        if self.api.timeout <= 0:
            errors.append("ECC_API_TIMEOUT must be positive")

        if self.api.base_url and not self.api.base_url.startswith(("http://", "https://")):
            errors.append("ECC_API_URL must start with http:// or https://")

        if self.timezone and self.timezone not in pytz.all_timezones_set:
            errors.append(f"ECC_TIMEZONE {self.timezone!r} is not a known time zone")

        if errors:
            raise ConfigError("Configuration errors:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Create the directories the client writes to"""
        directories = [self.storage.path.parent]
        if self.logging.log_file is not None:
            directories.append(self.logging.log_dir)

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to a dict"""
        return {
            'environment': self.environment.value,
            'storage': {
                'path': str(self.storage.path),
                'max_bytes': self.storage.max_bytes
            },
            'api': {
                'base_url': self.api.base_url,
                'api_prefix': self.api.api_prefix,
                'timeout': self.api.timeout
            },
            'timezone': self.timezone,
            'log_level': self.logging.level.value
        }

def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    return AppConfig(env)
