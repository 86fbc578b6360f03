# backend/creatorcall/core/exceptions.py
"""
Domain-specific exceptions for the creator booking platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when a request is malformed or fails business validation."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code or "VALIDATION_ERROR", details=details)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code or "NOT_FOUND", details=details)


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class SlotUnavailableException(DomainException):
    """Raised when a time slot cannot be claimed."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, time_slot_id: int, message: Optional[str] = None):
        super().__init__(
            message=message or "Time slot is not available",
            code="SLOT_UNAVAILABLE",
            details={"time_slot_id": time_slot_id},
        )


class AmountMismatchException(DomainException):
    """Raised when the client's expected amount differs from the creator's rate."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, expected_amount: int, actual_amount: int):
        super().__init__(
            message=(
                f"Expected amount {expected_amount} does not match the current rate {actual_amount}"
            ),
            code="AMOUNT_MISMATCH",
            details={"expected_amount": expected_amount, "actual_amount": actual_amount},
        )


class InvalidTransitionException(ConflictException):
    """Raised when a booking cannot move to the requested status."""

    def __init__(self, booking_id: int, current_status: str, target_status: str):
        super().__init__(
            message=f"Booking {booking_id} cannot move from {current_status} to {target_status}",
            code="INVALID_TRANSITION",
            details={
                "booking_id": booking_id,
                "current_status": current_status,
                "target_status": target_status,
            },
        )


class PaymentProviderException(ServiceException):
    """Raised when a payment adapter call fails."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="PAYMENT_PROVIDER_ERROR",
            details={"provider": provider, **(details or {})},
        )


class RepositoryException(Exception):
    """
    Exception raised for record store errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
