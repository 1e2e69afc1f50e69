"""Detection 모듈

사용법:
    from src.services.detection import discover_silhouettes, verify_presence

    silhouettes = discover_silhouettes(empty_image, full_image)
    outcome = verify_presence(captured_image, empty_image, regions)

두 엔진 모두 입력만으로 결과가 정해지는 순수 함수 (호출 간 공유 상태 없음).
"""

from src.services.detection.silhouette import (
    DimensionMismatchError,
    discover_silhouettes,
    tool_drafts,
)
from src.services.detection.utils import to_grayscale
from src.services.detection.verification import confidence_contribution, verify_presence

__all__ = [
    "DimensionMismatchError",
    "confidence_contribution",
    "discover_silhouettes",
    "to_grayscale",
    "tool_drafts",
    "verify_presence",
]
