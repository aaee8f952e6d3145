"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account
  3xxx: Listing
  4xxx: Cart
  5xxx: Settlement
  9xxx: System

Every error belongs to one of four kinds, which fix the HTTP status:
NotFound (404), Conflict (409), InvalidOperation (422), Transient (503).
Only Transient errors are worth retrying.
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        data: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.data = data
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(code, message, 404, data)


class ConflictError(AppError):
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(code, message, 409, data)


class InvalidOperationError(AppError):
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(code, message, 422, data)


class TransientError(AppError):
    """Storage-level failure (lock timeout, deadlock, lost connection). Safe to retry."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(code, message, 503, data)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class InvalidIdentityBridgeKeyError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Identity bridge key rejected", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1007, "Administrator privileges required", 403)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int) -> None:
        super().__init__(1008, f"User not found: {user_id}")


# --- 2xxx: Account ---

class InsufficientBalanceError(InvalidOperationError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            {"required_cents": required, "available_cents": available},
        )


# --- 3xxx: Listing ---

class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id: int) -> None:
        super().__init__(3001, f"Listing not found: {listing_id}")


class ListingNotCancellableError(NotFoundError):
    """Absent, owned by someone else, or no longer listed; the caller cannot tell which."""

    def __init__(self, listing_id: int) -> None:
        super().__init__(3002, f"Listing not found or not cancellable: {listing_id}")


class InvalidListingError(InvalidOperationError):
    def __init__(self, detail: str) -> None:
        super().__init__(3003, f"Invalid listing: {detail}")


# --- 4xxx: Cart ---

class CartEntryNotFoundError(NotFoundError):
    def __init__(self, listing_id: int) -> None:
        super().__init__(4001, f"Listing {listing_id} is not in the cart")


class DuplicateCartEntryError(ConflictError):
    def __init__(self, listing_id: int) -> None:
        super().__init__(4002, f"Listing {listing_id} is already in the cart")


class SelfPurchaseError(InvalidOperationError):
    def __init__(self) -> None:
        super().__init__(4003, "Cannot add your own listing to the cart")


# --- 5xxx: Settlement ---

class EmptyCartError(InvalidOperationError):
    def __init__(self) -> None:
        super().__init__(5001, "Cart is empty")


class ItemsUnavailableError(InvalidOperationError):
    """Some cart items are no longer listed (sold, cancelled, or lost to a concurrent buyer)."""

    def __init__(self, unavailable: list[dict[str, Any]]) -> None:
        names = ", ".join(str(item["name"]) for item in unavailable)
        super().__init__(
            5002,
            f"Some items are no longer available: {names}",
            {"unavailable": unavailable},
        )


class SettlementRetryableError(TransientError):
    def __init__(self, detail: str) -> None:
        super().__init__(5003, f"Checkout could not complete, please retry: {detail}")


class InvariantViolationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5004, f"Ledger invariant violated: {detail}", 500)


class CheckoutFailedError(InvalidOperationError):
    """Checkout aborted by a non-transient fault; every mutation was rolled back."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            5005,
            "Checkout failed and was rolled back; nothing was charged",
            {"reason": reason},
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self, retry_after: int = 60) -> None:
        super().__init__(9001, "Rate limit exceeded", 429, {"retry_after": retry_after})


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
