import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .config import Settings
from .errors import AnalysisError, ConfigurationError, ErrorKind, InvalidInput, ModelReportedFailure
from .fetcher import ImageFetcher, to_data_uri
from .parsing import parse_analysis
from .schemas import AnalyzeRequest, GarmentAnalysis
from .vision import VisionClient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    analysis: GarmentAnalysis
    status_code: int = 200


@dataclass(frozen=True)
class Failure:
    reason: str
    kind: ErrorKind
    status_code: int = 500
    partial_data: Optional[Dict[str, Any]] = None

    @classmethod
    def from_error(cls, err: AnalysisError) -> "Failure":
        partial = err.partial_data if isinstance(err, ModelReportedFailure) else None
        return cls(reason=err.message, kind=err.kind, status_code=err.status_code, partial_data=partial)


AnalysisOutcome = Union[Success, Failure]


class GarmentAnalyzer:
    """Fetches a stored garment photo, asks the vision model about it and
    validates the reply.

    One image fetch and one model call per ``analyze``; no retries and no
    state kept between calls, so a single instance serves concurrent
    requests.
    """

    def __init__(self, settings: Settings, fetcher: ImageFetcher, vision: VisionClient) -> None:
        self.settings = settings
        self.fetcher = fetcher
        self.vision = vision

    @classmethod
    def from_settings(cls, settings: Settings) -> "GarmentAnalyzer":
        fetcher = ImageFetcher(timeout=settings.REQUEST_TIMEOUT_SECONDS)
        vision = VisionClient(
            api_key=settings.OPENAI_API_KEY or "",
            base_url=settings.OPENAI_BASE_URL,
            model=settings.VISION_MODEL,
            temperature=settings.VISION_TEMPERATURE,
            max_tokens=settings.VISION_MAX_TOKENS,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
        return cls(settings, fetcher, vision)

    def validate(self, request: AnalyzeRequest) -> None:
        if not request.image_url or not request.user_id:
            raise InvalidInput("Missing imageUrl or userId")
        origin = self.settings.SUPABASE_URL
        if not origin or origin not in request.image_url:
            raise InvalidInput("Invalid image URL")
        if not self.settings.OPENAI_API_KEY:
            raise ConfigurationError("OpenAI API key not configured")

    def analyze(self, request: AnalyzeRequest) -> AnalysisOutcome:
        try:
            self.validate(request)
            image = self.fetcher.fetch(request.image_url)
            raw = self.vision.complete(to_data_uri(image))
            analysis = parse_analysis(raw)
        except AnalysisError as e:
            level = logging.WARNING if e.status_code < 500 else logging.ERROR
            logger.log(level, "analysis_failed", extra={"kind": e.kind.value, "reason": e.message, "user_id": request.user_id})
            return Failure.from_error(e)
        except Exception:
            logger.exception("analysis_unhandled", extra={"user_id": request.user_id})
            return Failure(reason="Internal server error", kind=ErrorKind.INTERNAL)
        logger.info("analysis_succeeded", extra={"user_id": request.user_id, "category": analysis.category})
        return Success(analysis)
