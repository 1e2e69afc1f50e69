from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.main import app
from src.services.loader import set_fetcher
from src.services.loader.image import LoadError
from tests.helpers import blank, png_bytes, with_rect


class FakeFetcher:
    """URL → 미리 등록된 바이트 (미등록 URL은 LoadError)"""

    def __init__(self, images: dict[str, bytes] | None = None) -> None:
        self.images = images or {}
        self.calls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.images:
            raise LoadError(url, "HTTP 404")
        return self.images[url]


@pytest.fixture
def fake_fetcher() -> Generator[FakeFetcher, None, None]:
    fetcher = FakeFetcher()
    set_fetcher(fetcher)
    yield fetcher
    set_fetcher(None)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    yield TestClient(app)


@pytest.fixture
def empty_cabinet_png() -> bytes:
    """300x200 흰색 빈 캐비닛"""
    return png_bytes(blank(300, 200))


@pytest.fixture
def full_cabinet_png() -> bytes:
    """빈 캐비닛 + (50, 40)에 100x50 검은 공구"""
    return png_bytes(with_rect(blank(300, 200), 50, 40, 100, 50))


@pytest.fixture
def test_small_png() -> bytes:
    """100x80 흰색 이미지 (크기 불일치용)"""
    return png_bytes(blank(100, 80))
