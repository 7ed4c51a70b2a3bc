"""
Exception taxonomy for college search.

Only ConfigError, SearchTimeoutError and UpstreamError leave the query
pipeline. ResponseParseError and EmptyResultError are raised by the
response parser and absorbed by the fallback prompt.
"""


class CollegeSearchError(Exception):
    """Base class for all search failures."""


class ConfigError(CollegeSearchError):
    def __init__(self, message: str = "Gemini API key is not configured. Please add GEMINI_API_KEY to your environment."):
        super().__init__(message)


class SearchTimeoutError(CollegeSearchError):
    def __init__(self, location: str, seconds: float):
        self.location = location
        self.seconds = seconds
        super().__init__(
            f"Search timeout after {seconds:g}s for {location}. "
            "Please try a different location or try again later."
        )


class UpstreamError(CollegeSearchError):
    def __init__(self, location: str):
        self.location = location
        super().__init__(
            f"Unable to find colleges in {location}. Please check your internet "
            "connection and API key, or try a different location."
        )


class ResponseParseError(CollegeSearchError):
    """Model output could not be parsed into a JSON array."""


class EmptyResultError(CollegeSearchError):
    """Model output parsed but held no usable college entries."""
