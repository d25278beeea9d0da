from .exceptions import (
    ConfigurationError,
    InputValidationError,
    RateLimitException,
    StoreUnavailableError,
    UnknownParserError,
    UslexParsingError,
)
from .http import HttpClient
from .rate_limiter import PolitenessLimiter

__all__ = [
    "HttpClient",
    "PolitenessLimiter",
    "ConfigurationError",
    "InputValidationError",
    "RateLimitException",
    "StoreUnavailableError",
    "UnknownParserError",
    "UslexParsingError",
]
