from .model import (
    ConfigurationReason,
    GlobalSettings,
    NotificationRequest,
    NotificationResult,
    PublisherSettings,
)
from .step import ConfigurationError, ZeroBugNotifier, run_zerobug_publisher

__all__ = [
    "run_zerobug_publisher",
    "ZeroBugNotifier",
    "ConfigurationError",
    "ConfigurationReason",
    "GlobalSettings",
    "NotificationRequest",
    "NotificationResult",
    "PublisherSettings",
]
