from .quota import QuotaState
from .referral import ReferralCodeResponse, ClaimReferralResponse
from .purchase import CreditPurchaseResponse
from .generate import GenerateRequest, GenerateResponse
