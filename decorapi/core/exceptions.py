from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class BaseAPIException(HTTPException):
    """Base exception for API errors.

    ``detail`` is the JSON body returned to the client:
    ``{"error": <code>, "message": ..., "details": ..., **extra}``.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details
        self.extra = extra or {}

        body: Dict[str, Any] = {"error": error_code, "message": message}
        if details is not None:
            body["details"] = details
        body.update(self.extra)

        super().__init__(status_code=status_code, detail=body)

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message


class ValidationError(BaseAPIException):
    """Malformed or missing input"""
    def __init__(self, message: str = "Validation failed", details: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            message=message,
            details=details,
        )


class NotFoundError(BaseAPIException):
    """Resource not found errors"""
    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            message=message,
            details=details,
            extra=extra,
        )


class SelfClaimError(BaseAPIException):
    def __init__(self, message: str = "Cannot claim your own referral code"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="SELF_CLAIM",
            message=message,
        )


class AlreadyClaimedError(BaseAPIException):
    def __init__(self, message: str = "You have already claimed this referral code"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="ALREADY_CLAIMED",
            message=message,
        )


class UnsupportedProductError(BaseAPIException):
    def __init__(self, product_id: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="UNSUPPORTED_PRODUCT",
            message="Unsupported productId",
            details=[f"No credit mapping configured for product {product_id}"],
        )


class QuotaExhaustedError(BaseAPIException):
    """No generations left; carries current counts so the client can resync"""
    def __init__(
        self,
        generations_remaining: int,
        total_generated: int,
        message: str = "No generations remaining. Share your referral code to earn more.",
    ):
        self.generations_remaining = generations_remaining
        self.total_generated = total_generated
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="QUOTA_EXHAUSTED",
            message=message,
            extra={
                "generationsRemaining": generations_remaining,
                "totalGenerated": total_generated,
            },
        )


class CodeGenerationExhaustedError(BaseAPIException):
    def __init__(self, attempts: int):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="CODE_GENERATION_EXHAUSTED",
            message="Failed to generate unique referral code",
            details={"attempts": attempts},
        )


class StorageError(BaseAPIException):
    """Wraps any persistence failure; the cause is logged, never returned"""
    def __init__(self, message: str = "A storage error occurred"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="STORAGE_ERROR",
            message=message,
        )


class ImageGenerationError(BaseAPIException):
    def __init__(
        self,
        message: str = "The AI model could not process the request. Please try a different prompt or image.",
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="GENERATION_FAILED",
            message=message,
        )


class InternalServerError(BaseAPIException):
    """Internal server errors"""
    def __init__(self, message: str = "Internal server error", details: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_ERROR",
            message=message,
            details=details,
        )
