"""
Tracking consent wrapper.

The consent prompt only exists on iOS; other platforms report it as not
required and start-up records the step as done.
"""

from typing import Optional

import structlog

from src.infrastructure.sdk.interfaces import TrackingTransparencyClient
from src.shared.exceptions import SDKError
from src.shared.types import Platform, TrackingAuthorization

logger = structlog.get_logger(__name__)

SDK_NAME = "att"


class ATTService:
    """Owns the tracking authorization state."""

    def __init__(self, client: TrackingTransparencyClient, platform: Platform):
        self._client = client
        self.platform = platform
        self._authorization: Optional[TrackingAuthorization] = None

    @property
    def is_required(self) -> bool:
        return self.platform == Platform.IOS

    @property
    def authorization(self) -> Optional[TrackingAuthorization]:
        return self._authorization

    @property
    def is_authorized(self) -> bool:
        return self._authorization == TrackingAuthorization.AUTHORIZED

    async def initialize(self) -> None:
        """Load the current authorization without prompting."""
        try:
            self._authorization = await self._client.get_status()
        except Exception as e:
            logger.error("Failed to read tracking authorization", error=str(e))
            raise SDKError(f"ATT status check failed: {e}", sdk=SDK_NAME) from e
        logger.info("Tracking authorization loaded", tracking_status=self._authorization.value)

    async def request_permission(self) -> TrackingAuthorization:
        """Prompt the user unless they have already answered."""
        if self._authorization is None:
            await self.initialize()

        if self._authorization != TrackingAuthorization.NOT_DETERMINED:
            logger.info("Tracking authorization already determined", tracking_status=self._authorization.value)
            return self._authorization

        logger.info("Requesting tracking authorization")
        try:
            self._authorization = await self._client.request_authorization()
        except Exception as e:
            logger.error("Tracking authorization request failed", error=str(e))
            raise SDKError(f"ATT permission request failed: {e}", sdk=SDK_NAME) from e

        logger.info("Tracking authorization answered", tracking_status=self._authorization.value)
        return self._authorization

    def reset(self) -> None:
        self._authorization = None
        logger.info("ATT service reset")
