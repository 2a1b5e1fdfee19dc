"""
Attribution SDK wrapper.

Starts the attribution SDK and retrieves the advertising identifier (ADID).
The ADID is only produced some time after the SDK registers the device, so
retrieval goes through a RetryableFetcher. Once obtained, the identifier is
handed to every registered listener (the purchases and analytics SDKs).
"""

from typing import Callable, List, Optional

import structlog

from src.infrastructure.resilience.retry import RetryConfig, RetryableFetcher
from src.infrastructure.sdk.interfaces import AttributionClient, AttributionConfig
from src.shared.exceptions import SDKError
from src.shared.types import AdvertisingID, SDKEnvironment

logger = structlog.get_logger(__name__)

SDK_NAME = "adjust"

AdidListener = Callable[[AdvertisingID], None]


class AdjustService:
    """Owns the attribution SDK lifecycle and the ADID it produces."""

    def __init__(
        self,
        client: AttributionClient,
        app_token: str,
        environment: SDKEnvironment = SDKEnvironment.SANDBOX,
        att_consent_waiting_interval: int = 120,
        retry_config: Optional[RetryConfig] = None,
        fetcher: Optional[RetryableFetcher] = None
    ):
        """
        Initialize service.

        Args:
            client: Attribution SDK binding
            app_token: Attribution app token
            environment: Sandbox or production reporting
            att_consent_waiting_interval: Seconds the SDK waits for the consent prompt
            retry_config: Budget for ADID retrieval
            fetcher: Pre-built fetcher, overriding ``retry_config``
        """
        self._client = client
        self.app_token = app_token
        self.environment = environment
        self.att_consent_waiting_interval = att_consent_waiting_interval
        # An empty string from the SDK is as good as no identifier
        self._fetcher = fetcher or RetryableFetcher(
            "adjust.adid",
            retry_config or RetryConfig(),
            is_empty=lambda value: not value
        )
        self._listeners: List[AdidListener] = []
        self._adid: Optional[AdvertisingID] = None
        self._is_initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def adid(self) -> Optional[AdvertisingID]:
        return self._adid

    def initialize(self) -> None:
        if self._is_initialized:
            logger.info("Adjust already initialized, skipping")
            return

        logger.info("Initializing Adjust", environment=self.environment.value)
        config = AttributionConfig(
            app_token=self.app_token,
            environment=self.environment,
            att_consent_waiting_interval=self.att_consent_waiting_interval
        )
        try:
            self._client.init_sdk(config)
        except Exception as e:
            logger.error("Failed to initialize Adjust", error=str(e))
            raise SDKError(f"Adjust initialization failed: {e}", sdk=SDK_NAME) from e

        self._is_initialized = True
        logger.info("Adjust initialized")

    def add_adid_listener(self, listener: AdidListener) -> None:
        """Register a callback receiving the ADID once it is retrieved."""
        self._listeners.append(listener)

    async def get_adid(self) -> Optional[AdvertisingID]:
        """Single lookup without retry."""
        try:
            return await self._client.get_adid()
        except Exception as e:
            logger.error("Failed to get ADID", error=str(e))
            return None

    async def retrieve_adid_with_retry(self) -> Optional[AdvertisingID]:
        """
        Retrieve the ADID within the retry budget and distribute it.

        Returns:
            The ADID, or None if the SDK never produced one
        """
        adid = await self._fetcher.fetch(self._client.get_adid)
        if not adid:
            logger.warning("ADID not available after retry attempts")
            return None

        self._adid = adid
        self._distribute(adid)
        return adid

    async def fetch_identifier(self) -> Optional[AdvertisingID]:
        return await self.retrieve_adid_with_retry()

    def clear_identifier(self) -> None:
        self._adid = None

    def _distribute(self, adid: AdvertisingID) -> None:
        for listener in self._listeners:
            try:
                listener(adid)
            except Exception as e:
                logger.error(
                    "ADID listener failed",
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e)
                )

    def track_event(self, event_token: str, revenue: Optional[float] = None, currency: Optional[str] = None) -> None:
        try:
            self._client.track_event(event_token, revenue, currency)
        except Exception as e:
            logger.error("Failed to track Adjust event", event_token=event_token, error=str(e))

    def reset(self) -> None:
        self._is_initialized = False
        self._adid = None
        logger.info("Adjust service reset")
