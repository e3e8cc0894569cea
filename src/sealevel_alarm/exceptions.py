"""Custom exception hierarchy for the application."""


class AppError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class InvalidCoordinateError(AppError):
    """Raised when coordinate input is malformed or out of range."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_COORDINATE")


class ProviderConfigurationError(AppError):
    """Raised when an elevation provider is unknown or not usable as configured."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PROVIDER_CONFIGURATION")


class TransportError(AppError):
    """Raised when an HTTP request fails at the network or status level."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        code: str = "TRANSPORT_FAILURE",
    ) -> None:
        super().__init__(message, code=code)
        self.url = url
        self.status_code = status_code


class TooManyRedirectsError(TransportError):
    """Raised when a redirect chain exceeds the configured cap."""

    def __init__(self, url: str, max_redirects: int) -> None:
        super().__init__(
            f"Exceeded {max_redirects} redirects while fetching {url}",
            url=url,
            code="TOO_MANY_REDIRECTS",
        )
        self.max_redirects = max_redirects


class RequestSupersededError(AppError):
    """Raised when a newer request replaced this one before it completed."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Request superseded: {url}", code="REQUEST_SUPERSEDED")
        self.url = url


class ParseError(AppError):
    """Base exception for provider responses that cannot be turned into an elevation."""


class MalformedResponseError(ParseError):
    """Raised when a recognized response format carries a bad field."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="MALFORMED")


class MissingFieldError(ParseError):
    """Raised when a JSON response lacks part of the expected structure."""

    def __init__(self, expectation: str) -> None:
        super().__init__(
            f"JSON response is missing expected {expectation}",
            code="MISSING_FIELD",
        )
        self.expectation = expectation


class UnrecognizedFormatError(ParseError):
    """Raised when a response matches none of the known formats."""

    def __init__(self, preview: str) -> None:
        super().__init__(f"Unrecognized response format: {preview!r}", code="UNRECOGNIZED_FORMAT")
        self.preview = preview


class DivideByZeroElevationError(ParseError):
    """Raised when a callback response carries a zero reciprocal elevation."""

    def __init__(self) -> None:
        super().__init__(
            "Callback response carries a zero value; elevation would be infinite",
            code="DIVIDE_BY_ZERO_ELEVATION",
        )
