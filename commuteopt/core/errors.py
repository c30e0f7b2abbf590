"""
Error taxonomy for commute analysis and the directions proxy
"""

from enum import Enum
from typing import Optional


class CommuteError(Exception):
    """Base class for all commuteopt errors"""
    pass


class InvalidWindowError(CommuteError, ValueError):
    """Time window ends before it starts or has an unusable interval"""
    pass


class NoFutureSlotsError(CommuteError):
    """Every departure time in the window has already passed"""

    def __init__(self, message: str, period: Optional[str] = None, window: Optional[str] = None):
        super().__init__(message)
        self.period = period
        self.window = window


class PastDateError(NoFutureSlotsError):
    """The selected day is over"""
    pass


class ProviderErrorKind(str, Enum):
    """Sub-kinds of travel time provider failures"""

    NO_ROUTE = "no_route"
    DENIED = "denied"
    OTHER = "other"


class ProviderError(CommuteError):
    """Travel time provider returned a non-OK answer"""

    def __init__(
        self,
        message: str,
        kind: ProviderErrorKind = ProviderErrorKind.OTHER,
        status: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.details = details

    @classmethod
    def from_status(cls, status: str, details: Optional[str] = None) -> "ProviderError":
        """Build an error from a Directions API status string"""
        if status in ("ZERO_RESULTS", "NOT_FOUND"):
            kind = ProviderErrorKind.NO_ROUTE
        elif status == "REQUEST_DENIED":
            kind = ProviderErrorKind.DENIED
        else:
            kind = ProviderErrorKind.OTHER
        return cls(f"Google API error: {status}", kind=kind, status=status, details=details)


class ProviderTimeoutError(CommuteError):
    """Provider did not answer within the per-call budget"""
    pass


class AllSlotsFailedError(CommuteError):
    """An analysis batch produced no usable slot"""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


class GovernorDeniedError(CommuteError):
    """Request rejected by the rate governor"""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class ConfigError(CommuteError):
    """Server or client configuration is missing or invalid"""
    pass
