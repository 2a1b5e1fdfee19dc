"""
Application start-up use cases.

This module contains the use cases that orchestrate bringing the third-party
SDKs up in a fixed order and tracking the progress of that sequence.
"""

# Generic sequencing
from .initialization import SequentialInitializer

# SDK start-up order
from .sdk_startup import (
    REVENUECAT_STEP,
    ATT_STEP,
    ADJUST_STEP,
    SCATE_STEP,
    ADID_STEP,
    SDK_STEP_ORDER,
    build_sdk_steps,
    create_sdk_initializer
)

__all__ = [
    # Generic sequencing
    "SequentialInitializer",

    # SDK start-up order
    "REVENUECAT_STEP",
    "ATT_STEP",
    "ADJUST_STEP",
    "SCATE_STEP",
    "ADID_STEP",
    "SDK_STEP_ORDER",
    "build_sdk_steps",
    "create_sdk_initializer",
]
