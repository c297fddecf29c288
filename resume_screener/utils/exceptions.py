"""
Custom Exception Classes for the Resume Screener API
"""
from typing import Dict, Any, List
from fastapi import HTTPException


GENERIC_FAILURE_MESSAGE = "Failed to screen resumes"


class ScreenerBaseException(Exception):
    """Base exception for the Resume Screener API"""

    # Message returned to the client; None means the exception's own message is safe to expose
    public_message: str = None

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @property
    def client_message(self) -> str:
        return self.public_message or self.message


class InputValidationError(ScreenerBaseException):
    """Raised when the screening request is missing a job description or resumes"""

    def __init__(self, message: str, field: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        super().__init__(message, error_code="INPUT_VALIDATION_ERROR", details=details, **kwargs)


class ExtractionFailure(ScreenerBaseException):
    """Raised when text cannot be extracted from a single uploaded file (non-fatal)"""

    def __init__(self, message: str, file_name: str = None, content_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if file_name:
            details['file_name'] = file_name
        if content_type:
            details['content_type'] = content_type
        super().__init__(message, error_code="EXTRACTION_FAILURE", details=details, **kwargs)


class CompletionProviderError(ScreenerBaseException):
    """Raised when the LLM provider call fails (network, auth, quota)"""

    public_message = GENERIC_FAILURE_MESSAGE

    def __init__(self, message: str, model_name: str = None, status_code: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if model_name:
            details['model_name'] = model_name
        if status_code:
            details['status_code'] = status_code
        kwargs.setdefault('error_code', "COMPLETION_PROVIDER_ERROR")
        super().__init__(message, details=details, **kwargs)


class CompletionTimeoutError(CompletionProviderError):
    """Raised when the completion call exceeds its time budget"""

    def __init__(self, message: str, timeout: float = None, **kwargs):
        details = kwargs.pop('details', {})
        if timeout is not None:
            details['timeout_seconds'] = timeout
        super().__init__(message, error_code="COMPLETION_TIMEOUT", details=details, **kwargs)


class MalformedCompletionOutput(ScreenerBaseException):
    """Raised when no JSON object can be recovered from the model response"""

    def __init__(self, message: str = "Could not parse screening results", raw_text: str = "", **kwargs):
        self.raw_text = raw_text
        details = kwargs.pop('details', {})
        details['raw_length'] = len(raw_text or "")
        super().__init__(message, error_code="MALFORMED_COMPLETION_OUTPUT", details=details, **kwargs)


class SchemaValidationError(ScreenerBaseException):
    """Raised when the recovered JSON does not match the screening result schema"""

    def __init__(self, message: str, field: str = None, errors: List[Dict[str, Any]] = None, **kwargs):
        self.field = field
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if errors:
            details['errors'] = errors
        super().__init__(message, error_code="SCHEMA_VALIDATION_ERROR", details=details, **kwargs)


class ConfigurationError(ScreenerBaseException):
    """Raised when configuration is invalid or missing"""

    public_message = GENERIC_FAILURE_MESSAGE

    def __init__(self, message: str, config_key: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ScreenerBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        InputValidationError: 400,
        CompletionProviderError: 500,
        CompletionTimeoutError: 500,
        MalformedCompletionOutput: 500,
        SchemaValidationError: 500,
        ConfigurationError: 500,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.client_message,
        "error_code": exc.error_code,
    }

    return HTTPException(status_code=status_code, detail=detail)
