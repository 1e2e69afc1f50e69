"""Detection 공통 유틸리티 (순수 함수)

그레이스케일 변환 → 차이 → 이진화 → 연결 요소 라벨링.
PixelBuffer는 (H, W, 4) RGBA, 그레이스케일은 (H, W) uint8.
"""

import math
from dataclasses import dataclass

import cv2
import numpy as np

from src.schemas.regions import Rect

LUMA_WEIGHTS = (0.299, 0.587, 0.114)  # threshold 튜닝이 이 가중치 기준


@dataclass(frozen=True, eq=False)
class Component:
    """연결 요소 (멤버 픽셀 좌표 + 바운딩 박스)"""

    xs: np.ndarray
    ys: np.ndarray
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def area(self) -> int:
        return int(self.xs.size)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1


def round_half_up(value: float) -> int:
    """0.5는 올림 (Python round()의 banker's rounding 대신)"""
    return int(math.floor(value + 0.5))


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """gray = round(0.299R + 0.587G + 0.114B)

    cv2.cvtColor는 고정소수점 반올림이 달라 사용하지 않음.
    """
    if image.ndim == 2:
        return image.astype(np.uint8, copy=True)

    rgb = image[..., :3].astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    luma = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]
    return np.floor(luma + 0.5).astype(np.uint8)


def abs_difference(gray_a: np.ndarray, gray_b: np.ndarray) -> np.ndarray:
    """픽셀별 |a - b|"""
    if gray_a.shape != gray_b.shape:
        raise ValueError(f"그레이스케일 크기 불일치: {gray_a.shape} vs {gray_b.shape}")
    return np.abs(gray_a.astype(np.int16) - gray_b.astype(np.int16)).astype(np.uint8)


def binarize(diff: np.ndarray, threshold: int) -> np.ndarray:
    """diff > threshold → 255, 그 외 0"""
    return np.where(diff > threshold, 255, 0).astype(np.uint8)


def find_components(binary: np.ndarray, connectivity: int = 8, min_area: int = 1) -> list[Component]:
    """이진 마스크의 연결 요소 (min_area 미만 제외)

    cv2.connectedComponentsWithStats로 라벨링 (반복 알고리즘, 재귀 없음).
    래스터 스캔(행 우선, 위→아래, 왼→오른쪽)에서 처음 만난 순서로 반환.
    """
    if connectivity not in (4, 8):
        raise ValueError(f"connectivity는 4 또는 8이어야 합니다: {connectivity}")

    _, width = binary.shape
    foreground = (binary > 0).astype(np.uint8)
    count, labels, stats, _ = cv2.connectedComponentsWithStats(
        foreground, connectivity=connectivity
    )
    if count <= 1:
        return []

    flat = labels.ravel()
    areas = stats[:, cv2.CC_STAT_AREA]

    # 라벨 번호 순으로 정렬된 멤버 픽셀 (라벨 k는 offsets[k-1]:offsets[k])
    members = np.flatnonzero(flat)
    members = members[np.argsort(flat[members], kind="stable")]
    offsets = np.concatenate(([0], np.cumsum(areas[1:])))

    # cv2 라벨 번호는 래스터 순서를 보장하지 않음
    label_ids, first_index = np.unique(flat, return_index=True)
    components: list[Component] = []

    for label in label_ids[np.argsort(first_index)].tolist():
        if label == 0 or areas[label] < min_area:
            continue

        ys, xs = np.divmod(members[offsets[label - 1] : offsets[label]], width)
        left = int(stats[label, cv2.CC_STAT_LEFT])
        top = int(stats[label, cv2.CC_STAT_TOP])
        components.append(
            Component(
                xs=xs,
                ys=ys,
                min_x=left,
                min_y=top,
                max_x=left + int(stats[label, cv2.CC_STAT_WIDTH]) - 1,
                max_y=top + int(stats[label, cv2.CC_STAT_HEIGHT]) - 1,
            )
        )

    return components


def scale_box(rect: Rect, scale_x: float, scale_y: float) -> tuple[int, int, int, int]:
    """(x, y, width, height)를 축별 배율로 스케일 (내림)"""
    return (
        math.floor(rect.x * scale_x),
        math.floor(rect.y * scale_y),
        math.floor(rect.width * scale_x),
        math.floor(rect.height * scale_y),
    )


def clip_box(box: tuple[int, int, int, int], width: int, height: int) -> tuple[int, int, int, int]:
    """(x, y, w, h) → 이미지 경계 [0, width] x [0, height] 내 (x1, y1, x2, y2)

    완전히 경계 밖이면 zero-area 반환.
    """
    x, y, w, h = box
    return (
        min(width, max(0, x)),
        min(height, max(0, y)),
        min(width, max(0, x + w)),
        min(height, max(0, y + h)),
    )


def region_mean_difference(
    gray_a: np.ndarray, gray_b: np.ndarray, box: tuple[int, int, int, int]
) -> float:
    """박스 내부 평균 |a - b| (클리핑 후 픽셀이 없으면 0.0)"""
    height, width = gray_a.shape
    x1, y1, x2, y2 = clip_box(box, width, height)
    if x2 <= x1 or y2 <= y1:
        return 0.0

    diff = abs_difference(gray_a[y1:y2, x1:x2], gray_b[y1:y2, x1:x2])
    return float(diff.mean())
