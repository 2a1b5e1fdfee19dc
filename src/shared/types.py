"""
Type definitions for the SDK bootstrap service.

This module contains all custom type definitions used throughout
the application to ensure type safety and clear interfaces.
"""

from typing import NewType
from enum import Enum

# Identifier types
StepName = NewType('StepName', str)
AdvertisingID = NewType('AdvertisingID', str)
EntitlementID = NewType('EntitlementID', str)


class Platform(str, Enum):
    """Host platforms the SDKs run on."""
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


class SDKEnvironment(str, Enum):
    """Vendor environment the SDKs report to."""
    SANDBOX = "sandbox"
    PRODUCTION = "production"


class TrackingAuthorization(str, Enum):
    """App tracking transparency authorization states."""
    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED = "authorized"


class LogFormat(str, Enum):
    """Output renderers for structured logs."""
    JSON = "json"
    CONSOLE = "console"
