# core/errors.py
from typing import Any, Optional

from fastapi import HTTPException

GENERIC_API_ERROR = "Something went wrong. Please try again."


class ApiError(Exception):
    """Upstream call failed: non-2xx response or transport error."""

    def __init__(self, status: int, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.payload = payload


class StorageError(Exception):
    """Durable mirror could not be read or written."""


class LoginRequired(Exception):
    def __init__(self, next_path: str = "/"):
        super().__init__(next_path)
        self.next_path = next_path


class AdminRequired(Exception):
    pass


class CheckoutError(Exception):
    """Checkout could not be completed; `message` is safe to show to the user."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IncompleteShipping(CheckoutError):
    def __init__(self, missing: list):
        super().__init__("Please complete shipping information")
        self.missing = missing


class EmptyCheckout(CheckoutError):
    status_code = 303

    def __init__(self):
        super().__init__("Your cart is empty")


class CheckoutInProgress(CheckoutError):
    status_code = 409

    def __init__(self):
        super().__init__("Checkout is already in progress")


class CheckoutFailed(CheckoutError):
    status_code = 502


class HandoffFailed(Exception):
    """Custom order could not be handed to checkout; the draft is kept."""

    message = "We could not submit your custom order. Please try again."


def message_from_payload(payload: Any, fallback: str = GENERIC_API_ERROR) -> str:
    """Pick the server's error text out of a JSON body, else `fallback`."""
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


def http_error(e: ApiError):
    """Map an upstream failure onto the response we give our own client."""
    status_code = e.status if 400 <= e.status < 500 else 502
    return HTTPException(status_code=status_code, detail=e.message)
