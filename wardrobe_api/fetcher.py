import base64
import logging
from typing import Callable

import requests

from .errors import UpstreamFetchError


logger = logging.getLogger(__name__)


class ImageFetcher:
    # one session per fetch, no cookies carried between requests
    def __init__(self, timeout: float = 30.0, session_factory: Callable[[], requests.Session] = requests.Session) -> None:
        self.timeout = timeout
        self.session_factory = session_factory

    def fetch(self, url: str) -> bytes:
        # signed urls carry their access token in the query string
        logger.info("image_fetch", extra={"url": url.split("?", 1)[0]})
        session = self.session_factory()
        try:
            resp = session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamFetchError(f"Failed to fetch image: {e}") from e
        finally:
            session.close()
        if not resp.ok:
            raise UpstreamFetchError(f"Failed to fetch image: {resp.reason or resp.status_code}", status=resp.status_code)
        return resp.content


def to_data_uri(data: bytes, mime: str = "image/jpeg") -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{encoded}"
