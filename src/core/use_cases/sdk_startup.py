"""
SDK start-up sequence.

Later steps depend on identifiers or permissions established by earlier ones:
the tracking consent prompt must be answered before the attribution SDK
starts, and the advertising identifier only exists once attribution is up.
The order below encodes those dependencies.
"""

import inspect
from typing import List

import structlog

from src.core.domain.components import (
    ConsentComponent,
    IdentifierComponent,
    InitializableComponent
)
from src.core.domain.entities import InitializationStep
from src.core.use_cases.initialization import SequentialInitializer
from src.shared.exceptions import IdentifierUnavailableError
from src.shared.types import StepName

logger = structlog.get_logger(__name__)

REVENUECAT_STEP = StepName("revenuecat")
ATT_STEP = StepName("att")
ADJUST_STEP = StepName("adjust")
SCATE_STEP = StepName("scate")
ADID_STEP = StepName("adid")

SDK_STEP_ORDER = (REVENUECAT_STEP, ATT_STEP, ADJUST_STEP, SCATE_STEP, ADID_STEP)


def _consent_step(consent: ConsentComponent):
    async def run() -> None:
        if not consent.is_required:
            logger.info("Tracking consent not required on this platform")
            return

        result = consent.initialize()
        if inspect.isawaitable(result):
            await result
        authorization = await consent.request_permission()
        logger.info("Tracking consent handled", tracking_status=getattr(authorization, "value", authorization))

    return run


def _identifier_step(attribution: IdentifierComponent):
    async def run() -> None:
        adid = await attribution.fetch_identifier()
        if not adid:
            raise IdentifierUnavailableError("adid")
        logger.info("Advertising identifier retrieved", adid=adid)

    return run


def build_sdk_steps(
    purchases: InitializableComponent,
    consent: ConsentComponent,
    attribution: IdentifierComponent,
    analytics: InitializableComponent
) -> List[InitializationStep]:
    """
    Build the ordered SDK initialization steps.

    Args:
        purchases: Subscription SDK wrapper
        consent: Tracking consent wrapper
        attribution: Attribution SDK wrapper, also the source of the ADID
        analytics: Analytics SDK wrapper

    Returns:
        Steps in start-up order; only the ADID step is best-effort
    """
    return [
        InitializationStep(REVENUECAT_STEP, purchases.initialize, purchases.reset),
        InitializationStep(ATT_STEP, _consent_step(consent), consent.reset),
        InitializationStep(ADJUST_STEP, attribution.initialize, attribution.reset),
        InitializationStep(SCATE_STEP, analytics.initialize, analytics.reset),
        InitializationStep(
            ADID_STEP,
            _identifier_step(attribution),
            attribution.clear_identifier,
            best_effort=True
        ),
    ]


def create_sdk_initializer(
    purchases: InitializableComponent,
    consent: ConsentComponent,
    attribution: IdentifierComponent,
    analytics: InitializableComponent
) -> SequentialInitializer:
    """Create the initializer for the SDK start-up sequence."""
    return SequentialInitializer(
        build_sdk_steps(purchases, consent, attribution, analytics),
        name="sdk"
    )
