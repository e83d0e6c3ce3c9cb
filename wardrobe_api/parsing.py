import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from .errors import InvalidShape, MalformedResponse, ModelReportedFailure
from .schemas import GarmentAnalysis


logger = logging.getLogger(__name__)

# ```json ... ``` or ``` ... ``` spanning the whole reply
_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def strip_code_fence(raw: str) -> str:
    text = raw.strip()
    match = _FENCE_RE.match(text)
    if match and match.group(1):
        return match.group(1).strip()
    return text


def parse_analysis(raw: str) -> GarmentAnalysis:
    """Turn the model's text completion into a validated analysis.

    Raises MalformedResponse when the (unfenced) text is not JSON,
    ModelReportedFailure when the model filled in its ``error`` field and
    InvalidShape when ``category`` or ``colors`` is missing or mistyped.
    Categories outside the prompt's list are accepted as-is.
    """
    candidate = strip_code_fence(raw)
    try:
        parsed: Any = json.loads(candidate)
    except ValueError:
        logger.error("model_output_unparseable", extra={"candidate": candidate, "raw": raw})
        raise MalformedResponse(raw)

    if not isinstance(parsed, dict):
        raise InvalidShape("Invalid AI response structure: expected a JSON object.")

    note = parsed.get("error")
    if note:
        logger.warning("model_reported_issue", extra={"note": note})
        raise ModelReportedFailure(str(note), partial_data=parsed)

    if not parsed.get("category") or not isinstance(parsed.get("colors"), list):
        logger.error("model_output_invalid_shape", extra={"parsed": parsed})
        raise InvalidShape()

    try:
        return GarmentAnalysis.model_validate(parsed)
    except ValidationError as e:
        raise InvalidShape(f"Invalid AI response structure: {e.error_count()} invalid field(s).") from e
