from dataclasses import replace
from typing import Optional

import pytest

from wardrobe_api.config import Settings
from wardrobe_api.errors import UpstreamFetchError
from wardrobe_api.handler import GarmentAnalyzer

from fakes import ORIGIN, FakeFetcher, FakeVision


@pytest.fixture()
def settings() -> Settings:
    return Settings(OPENAI_API_KEY="sk-test", SUPABASE_URL=ORIGIN, RATE_LIMIT_PER_MIN=0)


@pytest.fixture()
def image_url() -> str:
    return f"{ORIGIN}/storage/v1/object/sign/wardrobe/u1/shirt.jpg?token=abc"


@pytest.fixture()
def make_analyzer(settings: Settings):
    def _make(reply: Optional[str] = None, fetcher: Optional[FakeFetcher] = None, vision: Optional[FakeVision] = None, **overrides):
        cfg = replace(settings, **overrides)
        fetcher = fetcher or FakeFetcher(data=b"\xff\xd8jpeg")
        vision = vision or FakeVision(reply=reply)
        return GarmentAnalyzer(cfg, fetcher, vision), fetcher, vision

    return _make


@pytest.fixture()
def failing_fetcher() -> FakeFetcher:
    return FakeFetcher(error=UpstreamFetchError("Failed to fetch image: Not Found", status=404))
