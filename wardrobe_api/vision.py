import logging
from typing import Any, Callable, Dict

import requests

from .errors import UpstreamModelError


logger = logging.getLogger(__name__)

CATEGORIES = ("Top", "Bottom", "Dress", "Outerwear", "Shoes", "Accessories")

ANALYSIS_PROMPT = """Analyze this clothing item and return ONLY a JSON object with:
- "category": one of {categories}
- "colors": array of 1-2 dominant colors (e.g., ["blue", "white"])
- "brand": (optional) the brand name if visible/identifiable
- "description": (optional) a short, one-sentence description

If analysis is impossible, return a fallback JSON with an error field, like:
{{"category": "unknown", "colors": [], "error": "Could not identify garment."}}

Only return valid JSON, nothing else.""".format(categories=", ".join(f'"{c}"' for c in CATEGORIES))


def extract_error_detail(resp: requests.Response) -> str:
    # structured error body, then raw text, then the bare status
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    text = (resp.text or "").strip()
    if text:
        return text
    return f"Status: {resp.status_code}"


class VisionClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o",
        temperature: float = 0.1,
        max_tokens: int = 150,
        timeout: float = 30.0,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.session_factory = session_factory

    def build_payload(self, image_data_uri: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": ANALYSIS_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_data_uri}},
                    ],
                }
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def complete(self, image_data_uri: str) -> str:
        session = self.session_factory()
        try:
            resp = session.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
                json=self.build_payload(image_data_uri),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamModelError(str(e)) from e
        finally:
            session.close()

        if not resp.ok:
            detail = extract_error_detail(resp)
            logger.error("vision_api_error", extra={"status": resp.status_code, "detail": detail})
            raise UpstreamModelError(detail, status=resp.status_code)

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None
        logger.debug("vision_raw_content", extra={"content": content})
        if not content:
            raise UpstreamModelError("No response content from OpenAI", status=resp.status_code)
        if not isinstance(content, str):
            raise UpstreamModelError("Unexpected response content type from OpenAI", status=resp.status_code)
        return content
