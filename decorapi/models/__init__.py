from .base import Base
from .user import User
from .referral import ReferralCode, ReferralClaim
from .purchase import ProcessedPurchaseTransaction

__all__ = [
    "Base",
    "User",
    "ReferralCode",
    "ReferralClaim",
    "ProcessedPurchaseTransaction",
]
