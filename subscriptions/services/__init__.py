from .lifecycle import LifecycleResult, SubscriptionLifecycleService
from .usage import UsageService, UsageWindow

__all__ = [
    "LifecycleResult",
    "SubscriptionLifecycleService",
    "UsageService",
    "UsageWindow",
]
