class UslexParsingError(Exception):
    """Raised when a page that must yield provisions yields none."""

    def __init__(self, message: str):
        super().__init__(message)


class InputValidationError(Exception):
    """Raised when a tool argument is malformed, e.g. an unknown jurisdiction code."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class UnknownParserError(ValueError):
    """Raised when a configured parser name has no extraction strategy."""

    def __init__(self, name: str, available: list[str]):
        super().__init__(f'Unknown parser: "{name}". Available: {", ".join(available)}')
        self.name = name


class RateLimitException(Exception):
    """Raised when a publisher answers with HTTP 429."""

    def __init__(self, message: str, retry_after: int = None):
        super().__init__(message)
        self.retry_after = retry_after


class StoreUnavailableError(Exception):
    """Raised when the provision database cannot be opened."""


class ConfigurationError(Exception):
    """Raised when a manifest or seed directory required by ingest is missing."""
