"""Silhouette Discovery: 빈 캐비닛 vs 채워진 캐비닛 차이로 공구 실루엣 탐지

1. 두 이미지 그레이스케일 변환
2. 픽셀별 절대 차이
3. threshold 초과 픽셀 → 전경(255)
4. flood fill로 연결 요소 라벨링
5. min_area 미만 요소 제거 (노이즈/조명)
6. 바운딩 박스 + 면적 + 마스크 PNG 생성
"""

import logging

import numpy as np

from src.constants import Detection
from src.schemas.regions import Rect, Silhouette, ToolDraft
from src.services.detection.utils import (
    Component,
    abs_difference,
    binarize,
    find_components,
    to_grayscale,
)
from src.services.loader import encode_png, resize_image, to_data_url

logger = logging.getLogger(__name__)


class DimensionMismatchError(Exception):
    """empty/full 이미지 크기가 다르고 auto_resize가 꺼져 있음"""

    def __init__(self, empty_size: tuple[int, int], full_size: tuple[int, int]):
        self.empty_size = empty_size
        self.full_size = full_size
        super().__init__(
            f"이미지 크기 불일치: empty {empty_size[0]}x{empty_size[1]}, "
            f"full {full_size[0]}x{full_size[1]}"
        )


def render_mask(component: Component) -> bytes:
    """바운딩 박스 크기 RGBA PNG (멤버 픽셀 불투명, 나머지 투명)"""
    mask = np.zeros((component.height, component.width, 4), dtype=np.uint8)
    mask[component.ys - component.min_y, component.xs - component.min_x] = Detection.MASK_COLOR
    return encode_png(mask)


def _to_silhouette(component: Component, render_masks: bool) -> Silhouette:
    image_data = to_data_url(render_mask(component)) if render_masks else None
    return Silhouette(
        x=component.min_x,
        y=component.min_y,
        width=component.width,
        height=component.height,
        area=component.area,
        image_data=image_data,
    )


def discover_silhouettes(
    empty_image: np.ndarray,
    full_image: np.ndarray,
    min_area: int = Detection.MIN_AREA,
    threshold: int = Detection.THRESHOLD,
    *,
    connectivity: int = Detection.CONNECTIVITY,
    auto_resize: bool = False,
    render_masks: bool = True,
) -> list[Silhouette]:
    """두 이미지 차이에서 실루엣 탐지

    Args:
        empty_image: 빈 캐비닛 RGBA 배열 (좌표 기준)
        full_image: 공구가 채워진 캐비닛 RGBA 배열
        min_area: 최소 픽셀 수 (미만은 노이즈로 제거)
        threshold: 전경 판정 차이 (0-255, 초과 시 전경)
        connectivity: 4 또는 8 방향 연결
        auto_resize: 크기가 다르면 full을 empty 크기로 리샘플링
        render_masks: False면 image_data 생략

    Returns:
        래스터 스캔 순서의 Silhouette 리스트

    Raises:
        DimensionMismatchError: 크기 불일치 + auto_resize=False
        ValueError: 파라미터 범위 오류
    """
    if not 0 <= threshold <= 255:
        raise ValueError(f"threshold는 0-255 범위여야 합니다: {threshold}")
    if min_area < 1:
        raise ValueError(f"min_area는 1 이상이어야 합니다: {min_area}")

    empty_h, empty_w = empty_image.shape[:2]
    full_h, full_w = full_image.shape[:2]

    if (empty_w, empty_h) != (full_w, full_h):
        if not auto_resize:
            raise DimensionMismatchError((empty_w, empty_h), (full_w, full_h))
        logger.warning(f"full 이미지 리사이즈: {full_w}x{full_h} → {empty_w}x{empty_h}")
        full_image = resize_image(full_image, empty_w, empty_h)

    diff = abs_difference(to_grayscale(empty_image), to_grayscale(full_image))
    binary = binarize(diff, threshold)
    components = find_components(binary, connectivity=connectivity, min_area=min_area)

    silhouettes = [_to_silhouette(c, render_masks) for c in components]
    logger.info(f"Discovery 완료: {len(silhouettes)}개 실루엣 ({empty_w}x{empty_h})")
    return silhouettes


def tool_drafts(silhouettes: list[Silhouette]) -> list[ToolDraft]:
    """실루엣 → 기본 이름/설명이 붙은 공구 초안 (탐지 순서대로 번호)"""
    return [
        ToolDraft(
            name=f"공구 {i + 1}",
            description=f"자동 감지 - 면적: {sil.area} px",
            position=Rect(x=sil.x, y=sil.y, width=sil.width, height=sil.height),
            silhouette_data=sil,
        )
        for i, sil in enumerate(silhouettes)
    ]
