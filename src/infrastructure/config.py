"""
Service configuration.

Settings are read from the environment once at start-up and validated
eagerly, so a misconfigured deployment fails before any SDK is touched.
"""

import os
from typing import Any, Dict, List, Mapping, Optional

from src.infrastructure.resilience.retry import RetryConfig
from src.shared.exceptions import ConfigurationError, ValidationError
from src.shared.types import LogFormat, Platform, SDKEnvironment

REDACTED = "***"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BootstrapConfig:
    """SDK credentials, retry budget and logging settings with validation."""

    def __init__(
        self,
        adjust_app_token: str,
        scate_api_key: str,
        platform: Platform = Platform.IOS,
        environment: SDKEnvironment = SDKEnvironment.SANDBOX,
        revenuecat_ios_api_key: Optional[str] = None,
        revenuecat_android_api_key: Optional[str] = None,
        att_consent_waiting_interval: int = 120,
        adid_max_attempts: int = 5,
        adid_max_total_time_ms: int = 10000,
        adid_initial_delay_ms: int = 500,
        log_level: str = "INFO",
        log_format: LogFormat = LogFormat.JSON
    ):
        self.platform = self._validate_enum(Platform, platform, "platform")
        self.environment = self._validate_enum(SDKEnvironment, environment, "environment")
        self.adjust_app_token = self._validate_required(adjust_app_token, "adjust_app_token")
        self.scate_api_key = self._validate_required(scate_api_key, "scate_api_key")
        self.revenuecat_ios_api_key = revenuecat_ios_api_key or None
        self.revenuecat_android_api_key = revenuecat_android_api_key or None
        self.att_consent_waiting_interval = self._validate_positive_int(
            att_consent_waiting_interval, "att_consent_waiting_interval"
        )
        self.log_level = self._validate_log_level(log_level)
        self.log_format = self._validate_enum(LogFormat, log_format, "log_format")

        try:
            self.adid_retry = RetryConfig(
                max_attempts=adid_max_attempts,
                max_total_time_ms=adid_max_total_time_ms,
                initial_delay_ms=adid_initial_delay_ms
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid ADID retry settings: {e.message}") from e

        self._validate_platform_key()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BootstrapConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            adjust_app_token=env.get("ADJUST_APP_TOKEN", ""),
            scate_api_key=env.get("SCATE_API_KEY", ""),
            platform=env.get("SDKBOOT_PLATFORM", "ios"),
            environment=env.get("SDKBOOT_ENVIRONMENT", "sandbox"),
            revenuecat_ios_api_key=env.get("REVENUECAT_IOS_API_KEY"),
            revenuecat_android_api_key=env.get("REVENUECAT_ANDROID_API_KEY"),
            att_consent_waiting_interval=cls._parse_int(env, "ADJUST_ATT_CONSENT_WAITING_INTERVAL", 120),
            adid_max_attempts=cls._parse_int(env, "ADID_MAX_ATTEMPTS", 5),
            adid_max_total_time_ms=cls._parse_int(env, "ADID_MAX_TOTAL_TIME_MS", 10000),
            adid_initial_delay_ms=cls._parse_int(env, "ADID_INITIAL_DELAY_MS", 500),
            log_level=env.get("LOG_LEVEL", "INFO"),
            log_format=env.get("LOG_FORMAT", "json"),
        )

    @staticmethod
    def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
        raw = env.get(name)
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(f"{name} must be an integer, got: {raw!r}")

    @staticmethod
    def _validate_enum(enum_type, value, name: str):
        try:
            return enum_type(value.lower() if isinstance(value, str) else value)
        except ValueError:
            allowed = ", ".join(member.value for member in enum_type)
            raise ConfigurationError(f"{name} must be one of: {allowed}; got: {value!r}")

    @staticmethod
    def _validate_required(value: Optional[str], name: str) -> str:
        if not value or not value.strip():
            raise ConfigurationError(f"{name} is required")
        return value.strip()

    @staticmethod
    def _validate_positive_int(value: int, name: str) -> int:
        """Validate that a value is a positive integer."""
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"{name} must be a positive integer, got: {value}")
        return value

    @staticmethod
    def _validate_log_level(level: str) -> str:
        normalized = (level or "").upper()
        if normalized not in LOG_LEVELS:
            raise ConfigurationError(f"Unsupported log level: {level}")
        return normalized

    def _validate_platform_key(self) -> None:
        if self.platform == Platform.IOS and not self.revenuecat_ios_api_key:
            raise ConfigurationError("revenuecat_ios_api_key is required on ios")
        if self.platform == Platform.ANDROID and not self.revenuecat_android_api_key:
            raise ConfigurationError("revenuecat_android_api_key is required on android")

    def secret_values(self) -> List[str]:
        """Configured credentials, for log redaction."""
        candidates = (
            self.adjust_app_token,
            self.scate_api_key,
            self.revenuecat_ios_api_key,
            self.revenuecat_android_api_key,
        )
        return [value for value in candidates if value]

    def to_dict(self) -> Dict[str, Any]:
        """Render configuration with credentials redacted."""
        return {
            "platform": self.platform.value,
            "environment": self.environment.value,
            "adjust_app_token": REDACTED,
            "scate_api_key": REDACTED,
            "revenuecat_ios_api_key": REDACTED if self.revenuecat_ios_api_key else None,
            "revenuecat_android_api_key": REDACTED if self.revenuecat_android_api_key else None,
            "att_consent_waiting_interval": self.att_consent_waiting_interval,
            "adid_retry": {
                "max_attempts": self.adid_retry.max_attempts,
                "max_total_time_ms": self.adid_retry.max_total_time_ms,
                "initial_delay_ms": self.adid_retry.initial_delay_ms,
            },
            "log_level": self.log_level,
            "log_format": self.log_format.value,
        }
