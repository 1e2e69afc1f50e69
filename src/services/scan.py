"""Scan 서비스: 이미지 로드 → Discovery/Verification 엔진 → 결과 인코딩

HTTP 라우트에서 사용하는 요청/응답 스키마와 오케스트레이션.
저장/테넌트/인증은 외부 시스템 몫 (여기서는 상태 없음).
"""

import logging
from typing import Any

import numpy as np
from pydantic import Field, field_validator

from src.config import get_settings
from src.constants import Limits
from src.schemas.base import BaseSchema
from src.schemas.regions import Rect, RegionResult, Silhouette, ToolDraft, ToolRegion
from src.services.detection import (
    DimensionMismatchError,
    discover_silhouettes,
    tool_drafts,
    verify_presence,
)
from src.services.detection.utils import clip_box
from src.services.loader import LoadError, encode_jpeg, load_image, to_data_url
from src.services.overlay import render_detection_preview, render_overlay

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """Scan 작업 관련 에러

    code로 구체적인 원인 구분:
    - LOAD_FAILED: 이미지 다운로드/디코딩 실패 (422)
    - DIMENSION_MISMATCH: empty/full 크기 불일치 (422)
    - INVALID_PARAMETERS: 파라미터 범위 오류 (400)
    """

    STATUS_MAP: dict[str, int] = {
        "LOAD_FAILED": 422,
        "DIMENSION_MISMATCH": 422,
        "INVALID_PARAMETERS": 400,
    }

    def __init__(self, code: str, message: str, extra: dict[str, Any] | None = None):
        self.code = code
        self.message = message
        self.extra = extra or {}
        super().__init__(f"[{code}] {message}")

    @property
    def status_code(self) -> int:
        return self.STATUS_MAP.get(self.code, 500)


class SilhouetteRequest(BaseSchema):
    """실루엣 탐지 요청 (이미지는 URL / data URL / base64)"""

    empty_image: str
    full_image: str
    min_area: int | None = Field(default=None, ge=1)
    threshold: int | None = Field(default=None, ge=0, le=255)
    connectivity: int | None = None
    auto_resize: bool | None = None
    include_masks: bool = True
    include_preview: bool = False


class SilhouetteResponse(BaseSchema):
    silhouettes: list[Silhouette]
    tools: list[ToolDraft]
    preview_image: str | None = None  # data URL (JPEG)


class VerificationRequest(BaseSchema):
    """공구 존재 확인 요청"""

    captured_image: str
    reference_image: str
    regions: list[ToolRegion]
    threshold: float | None = Field(default=None, gt=0)
    include_overlay: bool = False

    @field_validator("regions")
    @classmethod
    def validate_regions(cls, v: list[ToolRegion]) -> list[ToolRegion]:
        if len(v) > Limits.MAX_REGIONS:
            raise ValueError(f"최대 {Limits.MAX_REGIONS}개 영역까지 가능합니다")
        ids = [r.id for r in v]
        if len(ids) != len(set(ids)):
            raise ValueError("영역 ID가 중복되었습니다")
        return v


class VerificationResponse(BaseSchema):
    present_ids: list[str]
    absent_ids: list[str]
    confidence_score: int
    completion_rate: float
    total_regions: int
    region_results: list[RegionResult]
    overlay_image: str | None = None  # data URL (JPEG)


class OverlayRequest(BaseSchema):
    captured_image: str
    regions: list[ToolRegion]
    absent_ids: list[str]


class OverlayResponse(BaseSchema):
    overlay_image: str  # data URL (JPEG)


def _load(source: str, role: str) -> np.ndarray:
    """이미지 로드 (role: 어떤 이미지인지 에러 메시지용)

    Raises:
        ScanError: LOAD_FAILED
    """
    try:
        return load_image(source)
    except LoadError as e:
        logger.error(f"{role} 이미지 로드 실패: {e}")
        raise ScanError(
            "LOAD_FAILED",
            f"{role} 이미지를 불러올 수 없습니다: {e.reason}",
            {"image": role, "source": e.source},
        ) from e


def _scaled_regions(
    regions: list[ToolRegion], results: list[RegionResult], width: int, height: int
) -> list[ToolRegion]:
    """판정에 사용한 captured 좌표 박스로 교체 (이미지 밖으로 완전히 벗어난 영역은 제외)"""
    scaled: list[ToolRegion] = []
    for region, result in zip(regions, results, strict=True):
        x1, y1, x2, y2 = clip_box(result.scaled_box, width, height)
        if x2 <= x1 or y2 <= y1:
            continue
        box = Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1)
        scaled.append(region.model_copy(update={"bounding_box": box}))
    return scaled


def _jpeg_data_url(image: Any) -> str:
    quality = get_settings().overlay_jpeg_quality
    return to_data_url(encode_jpeg(image, quality=quality), mime="image/jpeg")


def detect_silhouettes(request: SilhouetteRequest) -> SilhouetteResponse:
    """실루엣 탐지

    동기 함수 - FastAPI가 threadpool에서 실행.

    Raises:
        ScanError: 모든 에러 (code로 구분)
    """
    settings = get_settings()
    empty = _load(request.empty_image, "empty")
    full = _load(request.full_image, "full")

    try:
        silhouettes = discover_silhouettes(
            empty,
            full,
            min_area=request.min_area or settings.silhouette_min_area,
            threshold=(
                request.threshold if request.threshold is not None else settings.silhouette_threshold
            ),
            connectivity=(
                request.connectivity
                if request.connectivity is not None
                else settings.silhouette_connectivity
            ),
            auto_resize=(
                request.auto_resize
                if request.auto_resize is not None
                else settings.silhouette_auto_resize
            ),
            render_masks=request.include_masks,
        )
    except DimensionMismatchError as e:
        raise ScanError(
            "DIMENSION_MISMATCH",
            str(e),
            {"emptySize": list(e.empty_size), "fullSize": list(e.full_size)},
        ) from e
    except ValueError as e:
        raise ScanError("INVALID_PARAMETERS", str(e)) from e

    preview = None
    if request.include_preview:
        preview = _jpeg_data_url(render_detection_preview(full, silhouettes))

    return SilhouetteResponse(
        silhouettes=silhouettes,
        tools=tool_drafts(silhouettes),
        preview_image=preview,
    )


def verify_tools(request: VerificationRequest) -> VerificationResponse:
    """공구 존재 확인

    동기 함수 - FastAPI가 threadpool에서 실행.

    Raises:
        ScanError: 모든 에러 (code로 구분)
    """
    settings = get_settings()
    captured = _load(request.captured_image, "captured")
    reference = _load(request.reference_image, "reference")
    threshold = request.threshold or settings.verification_threshold

    try:
        outcome = verify_presence(captured, reference, request.regions, threshold=threshold)
    except ValueError as e:
        raise ScanError("INVALID_PARAMETERS", str(e)) from e

    overlay = None
    if request.include_overlay:
        height, width = captured.shape[:2]
        regions = _scaled_regions(request.regions, outcome.region_results, width, height)
        overlay = _jpeg_data_url(render_overlay(captured, regions, outcome.absent_ids))

    return VerificationResponse(
        present_ids=outcome.present_ids,
        absent_ids=outcome.absent_ids,
        confidence_score=outcome.confidence_score,
        completion_rate=outcome.completion_rate,
        total_regions=outcome.total_regions,
        region_results=outcome.region_results,
        overlay_image=overlay,
    )


def create_overlay(request: OverlayRequest) -> OverlayResponse:
    """판정 결과 오버레이 생성

    Raises:
        ScanError: LOAD_FAILED
    """
    captured = _load(request.captured_image, "captured")
    overlay = render_overlay(captured, request.regions, request.absent_ids)
    return OverlayResponse(overlay_image=_jpeg_data_url(overlay))
