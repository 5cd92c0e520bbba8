"""Errors raised by the Gemini service layer."""


class GeminiServiceError(Exception):
    """Base class for classified service failures. `code` is a stable identifier for callers."""
    code = "GEMINI_SERVICE_ERROR"


class ApiKeyMissingError(GeminiServiceError, ValueError):
    code = "API_KEY_MISSING"

    def __init__(self, message: str = "API key is missing. Set API_KEY (or GOOGLE_API_KEY) in the environment."):
        super().__init__(message)


class EmptyResponseError(GeminiServiceError):
    code = "EMPTY_RESPONSE"

    def __init__(self, message: str = "The model returned an empty response."):
        super().__init__(message)


class QuotaExceededError(GeminiServiceError):
    code = "QUOTA_EXCEEDED"

    def __init__(self, message: str = "Quota exceeded (429). Free tier limit reached or project restricted."):
        super().__init__(message)


class InvalidApiKeyError(GeminiServiceError):
    code = "INVALID_API_KEY"

    def __init__(self, message: str = "Permission denied (403). API key invalid or API not enabled."):
        super().__init__(message)


class InvalidResponseError(GeminiServiceError):
    code = "INVALID_RESPONSE"
