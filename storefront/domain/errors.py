"""
Failure taxonomy for the storefront.

Every error here degrades to something the shopper can recover from: an
inline form message, a notice, or a redirect. None of them should take the
process down.
"""
from typing import List, Optional


class StorefrontError(Exception):
    status_code = 400
    notice = "Something went wrong. Please try again."

    def __init__(self, notice: Optional[str] = None, redirect_to: Optional[str] = None):
        self.notice = notice or self.notice
        self.redirect_to = redirect_to
        super().__init__(self.notice)


class FormValidationError(StorefrontError):
    """Required form fields are blank. Raised before any network call."""
    status_code = 422

    def __init__(self, fields: List[str], notice: Optional[str] = None):
        self.fields = fields
        super().__init__(notice)


class AuthenticationRequired(StorefrontError):
    status_code = 401
    notice = "Please log in."

    def __init__(self, notice: Optional[str] = None):
        super().__init__(notice, redirect_to="/login")


class EmptyCartError(StorefrontError):
    status_code = 409
    notice = "Your cart is empty."

    def __init__(self):
        super().__init__(redirect_to="/cart")


class DataStoreError(StorefrontError):
    """A read or write against the hosted backend failed."""
    status_code = 502

    def __init__(self, message: str, table: Optional[str] = None, status: Optional[int] = None):
        self.table = table
        self.status = status
        super().__init__(message)


class OrderPlacementFailed(StorefrontError):
    status_code = 502
    notice = "Failed to place order. Please try again."


class TicketSubmissionFailed(StorefrontError):
    status_code = 502
    notice = "Failed to create support ticket. Please try again."
