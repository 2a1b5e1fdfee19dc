"""
Unit tests for service configuration.
"""
import pytest

from src.infrastructure.config import BootstrapConfig
from src.shared.exceptions import ConfigurationError
from src.shared.types import LogFormat, Platform, SDKEnvironment

BASE_ENV = {
    "ADJUST_APP_TOKEN": "x7d4cl94zgg0",
    "SCATE_API_KEY": "GKqUc",
    "REVENUECAT_IOS_API_KEY": "appl_TestIosKey000000000",
}


class TestBootstrapConfig:
    """Test cases for BootstrapConfig."""

    def test_from_env_defaults(self):
        config = BootstrapConfig.from_env(BASE_ENV)

        assert config.platform == Platform.IOS
        assert config.environment == SDKEnvironment.SANDBOX
        assert config.att_consent_waiting_interval == 120
        assert config.adid_retry.max_attempts == 5
        assert config.adid_retry.max_total_time_ms == 10000
        assert config.adid_retry.initial_delay_ms == 500
        assert config.log_level == "INFO"
        assert config.log_format == LogFormat.JSON

    def test_from_env_overrides(self):
        env = dict(
            BASE_ENV,
            SDKBOOT_PLATFORM="ANDROID",
            SDKBOOT_ENVIRONMENT="production",
            REVENUECAT_ANDROID_API_KEY="goog_key",
            ADID_MAX_ATTEMPTS="3",
            LOG_LEVEL="debug",
            LOG_FORMAT="console",
        )

        config = BootstrapConfig.from_env(env)

        assert config.platform == Platform.ANDROID
        assert config.environment == SDKEnvironment.PRODUCTION
        assert config.adid_retry.max_attempts == 3
        assert config.log_level == "DEBUG"
        assert config.log_format == LogFormat.CONSOLE

    @pytest.mark.parametrize("missing", ["ADJUST_APP_TOKEN", "SCATE_API_KEY", "REVENUECAT_IOS_API_KEY"])
    def test_required_settings(self, missing):
        env = {key: value for key, value in BASE_ENV.items() if key != missing}

        with pytest.raises(ConfigurationError, match="required"):
            BootstrapConfig.from_env(env)

    def test_android_requires_android_key(self):
        env = dict(BASE_ENV, SDKBOOT_PLATFORM="android")

        with pytest.raises(ConfigurationError, match="revenuecat_android_api_key"):
            BootstrapConfig.from_env(env)

    def test_invalid_platform(self):
        with pytest.raises(ConfigurationError, match="platform must be one of"):
            BootstrapConfig.from_env(dict(BASE_ENV, SDKBOOT_PLATFORM="windows"))

    def test_non_integer_setting(self):
        with pytest.raises(ConfigurationError, match="ADID_MAX_ATTEMPTS must be an integer"):
            BootstrapConfig.from_env(dict(BASE_ENV, ADID_MAX_ATTEMPTS="many"))

    def test_invalid_retry_budget(self):
        with pytest.raises(ConfigurationError, match="Invalid ADID retry settings"):
            BootstrapConfig.from_env(dict(BASE_ENV, ADID_MAX_TOTAL_TIME_MS="0"))

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError, match="Unsupported log level"):
            BootstrapConfig.from_env(dict(BASE_ENV, LOG_LEVEL="loud"))

    def test_secret_values(self):
        config = BootstrapConfig.from_env(BASE_ENV)

        assert config.secret_values() == ["x7d4cl94zgg0", "GKqUc", "appl_TestIosKey000000000"]

    def test_to_dict_redacts_credentials(self, bootstrap_config):
        rendered = bootstrap_config.to_dict()

        assert rendered["adjust_app_token"] == "***"
        assert rendered["scate_api_key"] == "***"
        assert rendered["revenuecat_ios_api_key"] == "***"
        assert "x7d4cl94zgg0" not in str(rendered)
        assert rendered["adid_retry"]["max_attempts"] == 5
