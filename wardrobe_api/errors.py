from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UPSTREAM_FETCH = "upstream_fetch"
    UPSTREAM_MODEL = "upstream_model"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_SHAPE = "invalid_shape"
    MODEL_REPORTED = "model_reported"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class AnalysisError(Exception):
    """Base for every failure the analysis handler converts into a result.

    ``kind`` is fixed per subclass and ``status_code`` is the HTTP status the
    endpoint answers with.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(AnalysisError):
    kind = ErrorKind.INVALID_INPUT
    status_code = 400


class UpstreamFetchError(AnalysisError):
    kind = ErrorKind.UPSTREAM_FETCH

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class UpstreamModelError(AnalysisError):
    kind = ErrorKind.UPSTREAM_MODEL

    def __init__(self, detail: str, status: Optional[int] = None) -> None:
        super().__init__(f"OpenAI API error: {detail}")
        self.detail = detail
        self.status = status


class MalformedResponse(AnalysisError):
    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, raw: str) -> None:
        super().__init__("Invalid AI response format even after cleaning attempts")
        self.raw = raw


class InvalidShape(AnalysisError):
    kind = ErrorKind.INVALID_SHAPE

    def __init__(self, message: str = 'Invalid AI response structure: "category" and "colors" are required.') -> None:
        super().__init__(message)


class ModelReportedFailure(AnalysisError):
    kind = ErrorKind.MODEL_REPORTED
    status_code = 200

    def __init__(self, note: str, partial_data: Dict[str, Any]) -> None:
        super().__init__(f"AI Analysis Note: {note}")
        self.note = note
        self.partial_data = partial_data


class ConfigurationError(AnalysisError):
    kind = ErrorKind.CONFIGURATION
