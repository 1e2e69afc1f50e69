"""Silhouette API 라우트

빈 캐비닛/채워진 캐비닛 사진 차이로 공구 실루엣을 탐지하는 엔드포인트.
"""

from fastapi import APIRouter, HTTPException, status

from src.services import scan as scan_service

router = APIRouter(prefix="/silhouettes", tags=["silhouettes"])


@router.post(
    "",
    response_model=scan_service.SilhouetteResponse,
    status_code=status.HTTP_200_OK,
)
def detect_silhouettes(request: scan_service.SilhouetteRequest) -> scan_service.SilhouetteResponse:
    """실루엣 탐지

    동기 엔드포인트 - FastAPI가 threadpool에서 실행.
    """
    try:
        return scan_service.detect_silhouettes(request)
    except scan_service.ScanError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"code": e.code, "message": e.message, **e.extra},
        ) from None
