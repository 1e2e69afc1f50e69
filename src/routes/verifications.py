"""Verification API 라우트

현재 사진에서 설정된 공구의 존재 여부를 판정하는 엔드포인트.
결과 저장(이력)은 호출 측 책임.
"""

from fastapi import APIRouter, HTTPException, status

from src.services import scan as scan_service

router = APIRouter(tags=["verifications"])


def _to_http_error(e: scan_service.ScanError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"code": e.code, "message": e.message, **e.extra},
    )


@router.post(
    "/verifications",
    response_model=scan_service.VerificationResponse,
    status_code=status.HTTP_200_OK,
)
def verify_tools(request: scan_service.VerificationRequest) -> scan_service.VerificationResponse:
    """공구 존재 확인 (동기 엔드포인트)"""
    try:
        return scan_service.verify_tools(request)
    except scan_service.ScanError as e:
        raise _to_http_error(e) from None


@router.post(
    "/overlays",
    response_model=scan_service.OverlayResponse,
    status_code=status.HTTP_200_OK,
)
def create_overlay(request: scan_service.OverlayRequest) -> scan_service.OverlayResponse:
    """판정 결과 오버레이 이미지 생성"""
    try:
        return scan_service.create_overlay(request)
    except scan_service.ScanError as e:
        raise _to_http_error(e) from None
