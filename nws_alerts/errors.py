"""Errors raised by alert source clients."""


class AlertServiceError(Exception):
    """Base class for failures of a single alert service call."""


class RequestConstructionError(AlertServiceError):
    """The outbound request could not be built."""


class NetworkError(AlertServiceError):
    """The request could not be completed (transport failure or HTTP error)."""


class DecodeError(AlertServiceError):
    """The response body is not JSON or does not have the expected shape."""


class FetchCancelled(AlertServiceError):
    """The cancel event was set before the request was sent."""
