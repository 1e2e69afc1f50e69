"""이미지 디코딩 / 리샘플링 / 인코딩

PixelBuffer는 (H, W, 4) uint8 RGBA numpy 배열.
"""

import base64
import binascii
import io

import cv2
import numpy as np
from PIL import Image, ImageOps

from src.constants import Limits


class LoadError(Exception):
    """이미지 리소스를 가져오거나 디코딩할 수 없음

    source는 URL 또는 "<bytes>" / "<base64>" 같은 라벨.
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"이미지 로드 실패 ({source}): {reason}")


def decode_image(data: bytes, label: str = "<bytes>") -> np.ndarray:
    """인코딩된 이미지 바이트 → RGBA 배열

    EXIF 회전을 반영하고, 모든 모드(L, P, RGB, CMYK 등)를 RGBA로 변환.

    Raises:
        LoadError: 디코딩 실패 또는 픽셀 수 초과
    """
    if not data:
        raise LoadError(label, "빈 데이터")

    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            if width * height > Limits.MAX_PIXELS:
                raise LoadError(
                    label,
                    f"총 픽셀수 초과: {width}x{height} (최대 {Limits.MAX_PIXELS})",
                )
            img.load()
            oriented = ImageOps.exif_transpose(img)
            return np.array(oriented.convert("RGBA"))
    except LoadError:
        raise
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise LoadError(label, f"이미지 디코딩 실패: {e}") from e


def decode_base64_source(source: str) -> bytes:
    """data URL 또는 순수 base64 문자열 → 바이트

    Raises:
        LoadError: 형식 오류
    """
    label = "<data-url>" if source.startswith("data:") else "<base64>"
    payload = source
    if source.startswith("data:"):
        header, sep, payload = source.partition(",")
        if not sep or ";base64" not in header:
            raise LoadError(label, "base64 data URL이 아님")

    # MIME 줄바꿈 등 공백 제거
    payload = "".join(payload.split())

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise LoadError(label, "base64 디코딩 실패") from e


def resize_image(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """새 크기로 리샘플링한 복사본 반환 (bilinear)"""
    if width <= 0 or height <= 0:
        raise ValueError(f"리사이즈 크기는 양수여야 합니다: {width}x{height}")
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)


def encode_png(image: np.ndarray) -> bytes:
    """numpy 배열 → PNG 바이트"""
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format="PNG")
    return buffer.getvalue()


def encode_jpeg(image: np.ndarray | Image.Image, quality: int = 90) -> bytes:
    """numpy 배열 또는 PIL 이미지 → JPEG 바이트 (알파 채널 제거)"""
    pil = image if isinstance(image, Image.Image) else Image.fromarray(image)
    buffer = io.BytesIO()
    pil.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def to_data_url(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode()}"
