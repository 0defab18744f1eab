from .base import Base
from .category import Category
from .subscription import Subscription, BillingCycle, SubscriptionStatus
from .subscription_share import ShareGroup, SubscriptionShare, SplitType

__all__ = [
    "Base",
    "Category",
    "Subscription",
    "BillingCycle",
    "SubscriptionStatus",
    "ShareGroup",
    "SubscriptionShare",
    "SplitType",
]
