"""테스트용 합성 이미지 유틸"""

import base64
from io import BytesIO

import numpy as np
from PIL import Image

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def blank(
    width: int = 200, height: int = 150, color: tuple[int, int, int, int] = WHITE
) -> np.ndarray:
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[:, :] = color
    return image


def with_rect(
    image: np.ndarray,
    x: int,
    y: int,
    width: int,
    height: int,
    color: tuple[int, int, int, int] = BLACK,
) -> np.ndarray:
    """사각형을 채운 복사본"""
    result = image.copy()
    result[y : y + height, x : x + width] = color
    return result


def gray(value: int) -> tuple[int, int, int, int]:
    return (value, value, value, 255)


def png_bytes(image: np.ndarray) -> bytes:
    buffer = BytesIO()
    Image.fromarray(image).save(buffer, format="PNG")
    return buffer.getvalue()


def b64_png(image: np.ndarray) -> str:
    return base64.b64encode(png_bytes(image)).decode()


def decode_data_url(data_url: str) -> Image.Image:
    _, _, payload = data_url.partition(",")
    return Image.open(BytesIO(base64.b64decode(payload)))
