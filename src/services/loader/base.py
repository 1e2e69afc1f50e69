"""ImageFetcher Protocol

원격 이미지 리소스(URL)를 바이트로 가져오는 교체 가능한 구현체 인터페이스.
"""

from typing import Protocol


class ImageFetcher(Protocol):
    """URL → 이미지 바이트

    구현체:
    - HttpImageFetcher: httpx 기반 HTTP(S) 다운로드
    """

    def fetch(self, url: str) -> bytes:
        """URL에서 인코딩된 이미지 바이트 다운로드

        Raises:
            LoadError: 다운로드 실패 시
        """
        ...
