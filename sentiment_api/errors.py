"""
Error types shared across the service.

Both external-call paths raise one of these so the HTTP layer can map them to
a status code in a single place.
"""


class SentimentApiError(Exception):
    """Base class for all service errors."""

    status_code = 500
    error_type = "internal_error"


class ConfigurationError(SentimentApiError):
    """Required configuration (usually a credential) is missing or invalid."""

    error_type = "configuration_error"


class SearchApiError(SentimentApiError):
    """The Twitter search API failed or returned something unusable."""

    status_code = 502
    error_type = "search_api_error"


class AnalysisApiError(SentimentApiError):
    """The NLU analysis API failed or returned something unusable."""

    status_code = 502
    error_type = "analysis_api_error"
