"""ImageFetcher 팩토리 테스트"""

from unittest.mock import patch

import pytest

from src.services.loader import get_fetcher, set_fetcher
from src.services.loader.http_fetcher import HttpImageFetcher


class TestGetFetcher:
    def setup_method(self) -> None:
        set_fetcher(None)

    def teardown_method(self) -> None:
        set_fetcher(None)

    def test_http_default(self) -> None:
        with patch("src.services.loader.get_settings") as mock_settings:
            mock_settings.return_value.image_fetcher = "http"
            mock_settings.return_value.image_fetch_timeout = 10
            mock_settings.return_value.image_fetch_retries = 1
            fetcher = get_fetcher()
        assert isinstance(fetcher, HttpImageFetcher)

    def test_unknown_fetcher_raises(self) -> None:
        with patch("src.services.loader.get_settings") as mock_settings:
            mock_settings.return_value.image_fetcher = "ftp"
            with pytest.raises(ValueError, match="Unknown image fetcher"):
                get_fetcher()

    def test_set_fetcher_overrides(self) -> None:
        mock = MockFetcher()
        set_fetcher(mock)
        assert get_fetcher() is mock

    def test_get_fetcher_caches(self) -> None:
        with patch("src.services.loader.get_settings") as mock_settings:
            mock_settings.return_value.image_fetcher = "http"
            mock_settings.return_value.image_fetch_timeout = 10
            mock_settings.return_value.image_fetch_retries = 1
            first = get_fetcher()
            second = get_fetcher()
        assert first is second


class MockFetcher:
    def fetch(self, url: str) -> bytes:
        return b""
