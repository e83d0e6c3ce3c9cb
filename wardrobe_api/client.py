import logging
from enum import Enum
from typing import Optional

import requests
from pydantic import ValidationError

from .schemas import AnalyzeResponse, GarmentAnalysis


logger = logging.getLogger(__name__)


class ClientErrorKind(str, Enum):
    INVALID_IMAGE_URL = "invalid_image_url"
    NETWORK = "network"
    API = "api"
    PARSE = "parse"


class ClientError(Exception):
    def __init__(self, kind: ClientErrorKind, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status

    @property
    def user_message(self) -> str:
        if self.kind is ClientErrorKind.INVALID_IMAGE_URL:
            return "Invalid image URL"
        if self.kind is ClientErrorKind.NETWORK:
            return "Network connection error"
        if self.kind is ClientErrorKind.PARSE:
            return "Failed to parse AI response"
        return f"AI analysis failed: {self.message}"


class AnalysisClient:
    """Calls the analyze-garment endpoint on behalf of an app user."""

    def __init__(
        self,
        endpoint: str,
        access_token: Optional[str] = None,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def analyze(self, image_url: str, user_id: str) -> GarmentAnalysis:
        if not image_url:
            raise ClientError(ClientErrorKind.INVALID_IMAGE_URL, "Invalid image URL")

        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        try:
            resp = self.session.post(
                self.endpoint,
                json={"imageUrl": image_url, "userId": user_id},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ClientError(ClientErrorKind.NETWORK, str(e)) from e

        try:
            body = AnalyzeResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            if resp.status_code >= 500:
                raise ClientError(
                    ClientErrorKind.API,
                    f"AI service is temporarily unavailable (HTTP {resp.status_code}). Please try again later.",
                    status=resp.status_code,
                ) from e
            raise ClientError(ClientErrorKind.PARSE, "Failed to parse AI response", status=resp.status_code) from e

        if body.success and body.data is not None:
            try:
                return GarmentAnalysis.model_validate(body.data)
            except ValidationError as e:
                raise ClientError(ClientErrorKind.PARSE, "Failed to parse AI response", status=resp.status_code) from e

        message = body.error or "Unknown AI analysis error"
        logger.warning("analysis_rejected", extra={"status": resp.status_code, "reason": message})
        raise ClientError(ClientErrorKind.API, message, status=resp.status_code)
