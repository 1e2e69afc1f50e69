"""결과 오버레이 렌더링

판정 로직 없음. Verification/Discovery 결과를 사진 위에 시각화만 함.
"""

import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import cast

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from src.constants import OverlayStyle
from src.schemas.regions import Silhouette, ToolRegion

logger = logging.getLogger(__name__)

FONT_PATHS = [
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]


class OverlayError(Exception):
    pass


@lru_cache(maxsize=8)
def _get_font(size: int) -> ImageFont.FreeTypeFont:
    for font_path in FONT_PATHS:
        if Path(font_path).exists():
            try:
                return ImageFont.truetype(font_path, size)
            except Exception:
                continue
    return cast(ImageFont.FreeTypeFont, ImageFont.load_default())


def _to_pil(image: np.ndarray) -> Image.Image:
    if image.size == 0:
        raise OverlayError("유효하지 않은 이미지입니다")
    return Image.fromarray(image).convert("RGB")


def _draw_absent(draw: ImageDraw.ImageDraw, region: ToolRegion) -> None:
    x1, y1, x2, y2 = region.bounding_box.to_corners()

    draw.rectangle((x1, y1, x2 - 1, y2 - 1), fill=OverlayStyle.ABSENT_FILL)
    draw.rectangle(
        (x1, y1, x2 - 1, y2 - 1),
        outline=OverlayStyle.ABSENT_BORDER,
        width=OverlayStyle.ABSENT_BORDER_WIDTH,
    )

    # 박스 위쪽 라벨 바
    bar_top = y1 - OverlayStyle.LABEL_BAR_HEIGHT
    draw.rectangle((x1, bar_top, x2 - 1, y1 - 1), fill=OverlayStyle.LABEL_BAR)

    font = _get_font(OverlayStyle.LABEL_FONT_SIZE)
    text_bbox = draw.textbbox((0, 0), region.label, font=font)
    text_height = text_bbox[3] - text_bbox[1]
    text_y = bar_top + (OverlayStyle.LABEL_BAR_HEIGHT - text_height) / 2 - text_bbox[1]
    draw.text((x1 + 8, text_y), region.label, font=font, fill=OverlayStyle.LABEL_TEXT)


def _draw_present(draw: ImageDraw.ImageDraw, region: ToolRegion) -> None:
    """우상단 체크 표시"""
    x1, y1, x2, _ = region.bounding_box.to_corners()
    draw.line(
        [(x2 - 30, y1 + 15), (x2 - 20, y1 + 25), (x2 - 10, y1 + 10)],
        fill=OverlayStyle.PRESENT_CHECK,
        width=OverlayStyle.PRESENT_CHECK_WIDTH,
        joint="curve",
    )


def render_overlay(
    captured_image: np.ndarray,
    regions: list[ToolRegion],
    absent_ids: Iterable[str],
) -> Image.Image:
    """absent 영역은 빨간 박스 + 이름 라벨, present 영역은 초록 체크

    좌표는 captured 이미지 기준. 이미지 밖으로 나가는 부분은 잘림.
    """
    pil_image = _to_pil(captured_image)
    draw = ImageDraw.Draw(pil_image, "RGBA")
    absent = set(absent_ids)

    for region in regions:
        if region.id in absent:
            _draw_absent(draw, region)

    for region in regions:
        if region.id not in absent:
            _draw_present(draw, region)

    logger.info(f"오버레이 렌더링 완료: {len(regions)}개 영역 (absent {len(absent)}개)")
    return pil_image


def render_detection_preview(full_image: np.ndarray, silhouettes: list[Silhouette]) -> Image.Image:
    """Discovery 결과 미리보기 (full 이미지 + 실루엣 바운딩 박스)"""
    pil_image = _to_pil(full_image)
    draw = ImageDraw.Draw(pil_image, "RGBA")

    for sil in silhouettes:
        x1, y1, x2, y2 = sil.bounding_box.to_corners()
        draw.rectangle(
            (x1, y1, x2 - 1, y2 - 1),
            outline=OverlayStyle.PREVIEW_OUTLINE,
            width=OverlayStyle.PREVIEW_OUTLINE_WIDTH,
        )

    return pil_image
