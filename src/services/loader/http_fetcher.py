"""httpx 기반 ImageFetcher 구현체"""

import logging
import time

import httpx

from src.services.loader.image import LoadError

logger = logging.getLogger(__name__)


class HttpImageFetcher:
    """HTTP(S) URL에서 이미지 다운로드

    전송 오류/5xx는 지수 백오프로 재시도, 4xx는 즉시 실패.
    """

    def __init__(self, timeout: int = 30, max_retries: int = 2, backoff: float = 0.5) -> None:
        self._timeout = timeout
        self._max_retries = max_retries
        self._backoff = backoff

    def fetch(self, url: str) -> bytes:
        last_error: Exception | None = None

        for attempt in range(1 + self._max_retries):
            try:
                with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                    resp = client.get(url)
                    resp.raise_for_status()
                return resp.content
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status < 500:
                    raise LoadError(url, f"HTTP {status}") from e
                last_error = e
            except httpx.HTTPError as e:
                last_error = e

            if attempt < self._max_retries:
                logger.warning(f"이미지 다운로드 재시도 ({attempt + 1}/{self._max_retries}): {url}")
                time.sleep(self._backoff * 2**attempt)

        raise LoadError(url, f"이미지 다운로드 실패: {last_error}") from last_error
