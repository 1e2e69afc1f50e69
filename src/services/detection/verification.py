"""Verification: 현재 사진에서 공구 존재 여부 판정

각 공구 영역의 평균 그레이스케일 차이(현재 vs 빈 캐비닛)가 threshold를 넘으면 present.
그레이스케일 공식은 Discovery와 동일해야 threshold가 호환됨.
"""

import logging

import numpy as np

from src.constants import Verification
from src.schemas.regions import RegionResult, ToolRegion, VerificationOutcome
from src.services.detection.utils import (
    clip_box,
    region_mean_difference,
    round_half_up,
    scale_box,
    to_grayscale,
)
from src.services.loader import resize_image

logger = logging.getLogger(__name__)


def confidence_contribution(average_difference: float, threshold: float, present: bool) -> float:
    """영역별 신뢰도 기여 (threshold 경계에서 50, 순수 함수)

    present: min(100, diff / threshold * 50)
    absent:  max(0, 50 - diff / threshold * 50)
    """
    ratio = average_difference / threshold * Verification.NEUTRAL_CONFIDENCE
    if present:
        return min(Verification.MAX_CONFIDENCE, ratio)
    return max(0.0, Verification.NEUTRAL_CONFIDENCE - ratio)


def verify_presence(
    captured_image: np.ndarray,
    reference_image: np.ndarray,
    regions: list[ToolRegion],
    threshold: float = Verification.THRESHOLD,
) -> VerificationOutcome:
    """공구 영역별 present/absent 판정

    Args:
        captured_image: 현재 캐비닛 RGBA 배열
        reference_image: 빈 캐비닛 RGBA 배열 (regions 좌표 기준)
        regions: 판정할 공구 영역 (비어 있어도 됨)
        threshold: 평균 차이가 이 값을 넘으면 present (> 0)

    Returns:
        VerificationOutcome (입력 순서 유지)

    Raises:
        ValueError: threshold <= 0
    """
    if threshold <= 0:
        raise ValueError(f"threshold는 양수여야 합니다: {threshold}")

    captured_h, captured_w = captured_image.shape[:2]
    reference_h, reference_w = reference_image.shape[:2]

    # regions는 원본 reference 좌표 → captured 좌표
    scale_x = captured_w / reference_w
    scale_y = captured_h / reference_h

    if (captured_w, captured_h) != (reference_w, reference_h):
        logger.info(
            f"reference 리사이즈: {reference_w}x{reference_h} → {captured_w}x{captured_h}"
        )
        reference_image = resize_image(reference_image, captured_w, captured_h)

    captured_gray = to_grayscale(captured_image)
    reference_gray = to_grayscale(reference_image)

    present_ids: list[str] = []
    absent_ids: list[str] = []
    results: list[RegionResult] = []
    total_confidence = 0.0

    for region in regions:
        box = scale_box(region.bounding_box, scale_x, scale_y)
        x1, y1, x2, y2 = clip_box(box, captured_w, captured_h)
        if x2 <= x1 or y2 <= y1:
            logger.warning(f"영역이 이미지 밖에 있음: {region.id} {box}")

        average = region_mean_difference(captured_gray, reference_gray, box)
        present = average > threshold
        contribution = confidence_contribution(average, threshold, present)

        (present_ids if present else absent_ids).append(region.id)
        total_confidence += contribution
        results.append(
            RegionResult(
                id=region.id,
                scaled_box=box,
                average_difference=average,
                present=present,
                contribution=contribution,
            )
        )

    confidence_score = round_half_up(total_confidence / len(regions)) if regions else 0

    logger.info(
        f"Verification 완료: present {len(present_ids)}개, absent {len(absent_ids)}개, "
        f"신뢰도 {confidence_score}"
    )
    return VerificationOutcome(
        present_ids=present_ids,
        absent_ids=absent_ids,
        confidence_score=confidence_score,
        region_results=results,
    )
