"""
Error taxonomy for the leaderboard pipeline.

Identity-resolution misses are not errors (rows are dropped during
aggregation) and malformed rows never raise; everything here is either a
caller error or a failure of the external row source.
"""

from typing import Any, Optional


class StaffAnalyticsError(Exception):
    """Base exception for leaderboard and report errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(StaffAnalyticsError, ValueError):
    """Raised when required configuration is unusable."""


class MissingParameterError(StaffAnalyticsError):
    """Raised when a required identifier is absent from a request."""

    status_code = 400

    def __init__(self, name: str):
        super().__init__(f"Missing {name}")
        self.name = name


class UnknownSourceError(StaffAnalyticsError):
    """Raised when a property id is not among the configured sites."""

    status_code = 404

    def __init__(self, property_id: str):
        super().__init__(f"Unknown propertyId '{property_id}'")
        self.property_id = property_id


class InvalidRankingMetricError(StaffAnalyticsError, ValueError):
    """Raised for a ranking metric outside activeUsers/sessions/screenPageViews."""

    status_code = 400

    def __init__(self, value: Any):
        super().__init__(
            f"Invalid ranking metric '{value}'",
            details={"allowed": ["activeUsers", "sessions", "screenPageViews"]},
        )
        self.value = value


class InvalidModeError(StaffAnalyticsError, ValueError):
    """Raised for an identity mode other than alias/employee."""

    status_code = 400

    def __init__(self, value: Any):
        super().__init__(f"Invalid mode '{value}'", details={"allowed": ["alias", "employee"]})
        self.value = value


class RowSourceError(StaffAnalyticsError):
    """Raised when the external row source fails for one property."""

    status_code = 502

    def __init__(self, property_id: str, cause: BaseException, details: Optional[Any] = None):
        super().__init__(str(cause) or type(cause).__name__, details=details)
        self.property_id = property_id
        self.cause = cause


class ReportingClientUnavailableError(StaffAnalyticsError):
    """Raised when no reporting client has been configured."""

    status_code = 503

    def __init__(self):
        super().__init__("Reporting client is not configured")
