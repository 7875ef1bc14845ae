"""
Domain exceptions for analytics app.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidPeriodError
    └── StoreTimeoutError

Dashboard reports never raise these for store failures; they degrade to
zeroed results. Single-customer lookups raise StoreTimeoutError so the
customer page can tell "not found" apart from "try again".
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    Views catch it to turn report errors into JSON responses:

        try:
            data = ShopAnalytics.customer_summary(phone)
        except StoreTimeoutError as e:
            return Response({'error': str(e)}, status=503)
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when an earnings period is not one of today, week, month, year, all.

    Example:
        raise InvalidPeriodError("Invalid period: 'decade'")
    """

    pass


class StoreTimeoutError(AnalyticsServiceError):
    """
    Raised when the store fails or times out while serving a lookup.

    Mapped to HTTP 503; the caller may retry.
    """

    pass
