"""Image Loader 모듈

사용법:
    from src.services.loader import load_image

    image = load_image(source)  # (H, W, 4) RGBA

source 형식:
    - bytes: 인코딩된 이미지 바이트
    - "http(s)://...": ImageFetcher로 다운로드
    - "data:image/...;base64,...": data URL
    - 그 외 문자열: 순수 base64

Fetcher 선택 (.env IMAGE_FETCHER):
    - "http": httpx 다운로드 (기본값)
"""

import numpy as np

from src.config import get_settings
from src.services.loader.base import ImageFetcher
from src.services.loader.image import (
    LoadError,
    decode_base64_source,
    decode_image,
    encode_jpeg,
    encode_png,
    resize_image,
    to_data_url,
)

__all__ = [
    "ImageFetcher",
    "ImageSource",
    "LoadError",
    "decode_image",
    "encode_jpeg",
    "encode_png",
    "get_fetcher",
    "load_image",
    "resize_image",
    "set_fetcher",
    "to_data_url",
]

ImageSource = bytes | str

_fetcher: ImageFetcher | None = None


def get_fetcher() -> ImageFetcher:
    """설정에 따라 fetcher 반환"""
    global _fetcher
    if _fetcher is None:
        settings = get_settings()
        if settings.image_fetcher == "http":
            from src.services.loader.http_fetcher import HttpImageFetcher

            _fetcher = HttpImageFetcher(
                timeout=settings.image_fetch_timeout,
                max_retries=settings.image_fetch_retries,
            )
        else:
            raise ValueError(f"Unknown image fetcher: {settings.image_fetcher!r}")
    return _fetcher


def set_fetcher(fetcher: ImageFetcher | None) -> None:
    """fetcher 설정 (테스트용)"""
    global _fetcher
    _fetcher = fetcher


def load_image(source: ImageSource) -> np.ndarray:
    """이미지 리소스 → RGBA PixelBuffer (캐싱 없음)

    Raises:
        LoadError: 다운로드/디코딩 실패
    """
    if isinstance(source, bytes):
        return decode_image(source, "<bytes>")

    if source.startswith(("http://", "https://")):
        data = get_fetcher().fetch(source)
        return decode_image(data, source)

    data = decode_base64_source(source)
    return decode_image(data, "<data-url>" if source.startswith("data:") else "<base64>")
