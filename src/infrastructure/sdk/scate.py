"""Analytics SDK wrapper."""

from typing import Any, Dict, Optional

import structlog

from src.infrastructure.sdk.interfaces import AnalyticsClient
from src.shared.exceptions import SDKError
from src.shared.types import AdvertisingID

logger = structlog.get_logger(__name__)

SDK_NAME = "scate"


class ScateService:
    """Owns the analytics SDK lifecycle."""

    def __init__(self, client: AnalyticsClient, api_key: str):
        self._client = client
        self.api_key = api_key
        self._is_initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def initialize(self) -> None:
        if self._is_initialized:
            logger.info("Scate already initialized, skipping")
            return

        logger.info("Initializing Scate")
        try:
            self._client.init(self.api_key)
        except Exception as e:
            logger.error("Failed to initialize Scate", error=str(e))
            raise SDKError(f"Scate initialization failed: {e}", sdk=SDK_NAME) from e

        self._is_initialized = True
        logger.info("Scate initialized")

    def set_adid(self, adid: AdvertisingID) -> None:
        logger.info("Setting ADID on Scate", adid=adid)
        try:
            self._client.set_adid(adid)
        except Exception as e:
            logger.error("Failed to set ADID on Scate", error=str(e))
            raise SDKError(f"Failed to set ADID: {e}", sdk=SDK_NAME) from e

    def track_event(self, name: str, parameters: Optional[Dict[str, Any]] = None) -> None:
        # Event tracking is fire-and-forget
        try:
            self._client.track_event(name, parameters)
        except Exception as e:
            logger.error("Failed to track Scate event", event_name=name, error=str(e))

    def reset(self) -> None:
        self._is_initialized = False
        logger.info("Scate service reset")
