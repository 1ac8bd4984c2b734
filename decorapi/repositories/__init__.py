# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .user_repository import UserRepository
from .referral_repository import ReferralRepository, ReferralClaimRepository
from .purchase_repository import PurchaseRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ReferralRepository",
    "ReferralClaimRepository",
    "PurchaseRepository",
]
