"""캐비닛 스캔 데이터 모델

Discovery(빈 캐비닛 vs 채워진 캐비닛) → Verification(현재 사진) 전체에서 사용하는 공통 스키마.
모든 좌표는 좌상단 원점 기준 정수 픽셀.
"""

from typing import Any

from pydantic import Field, computed_field

from src.schemas.base import BaseSchema


class Rect(BaseSchema):
    """축 정렬 사각형 (x, y, width, height)

    유효성:
    - x, y >= 0
    - width, height > 0
    """

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    def to_tuple(self) -> tuple[int, int, int, int]:
        """(x, y, width, height) 튜플로 변환"""
        return (self.x, self.y, self.width, self.height)

    def to_corners(self) -> tuple[int, int, int, int]:
        """(x1, y1, x2, y2) 튜플로 변환 (PIL/cv2 그리기용, x2/y2는 exclusive)"""
        return (self.x, self.y, self.x2, self.y2)


class Silhouette(BaseSchema):
    """Discovery 결과: 연결 요소 하나 = 공구 하나의 실루엣

    area는 연결 요소의 픽셀 수 (바운딩 박스 면적이 아님).
    image_data는 바운딩 박스 크기의 마스크 PNG (data URL), 렌더링을 끈 경우 None.
    """

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    area: int = Field(ge=1)
    image_data: str | None = None

    @property
    def bounding_box(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)


class ToolRegion(BaseSchema):
    """Verification 입력: 공구 ID + 설정된 바운딩 박스

    silhouette_data는 거리 임계값 알고리즘에서 사용하지 않지만 그대로 전달.
    """

    id: str = Field(min_length=1)
    name: str | None = None
    bounding_box: Rect
    silhouette_data: dict[str, Any] | None = None

    @property
    def label(self) -> str:
        return self.name or self.id


class ToolDraft(BaseSchema):
    """Discovery 직후 생성되는 기본 공구 정보 (저장은 외부 시스템 몫)"""

    name: str
    description: str
    position: Rect
    silhouette_data: Silhouette


class RegionResult(BaseSchema):
    """영역 하나의 판정 상세

    scaled_box는 리스케일 + 클리핑 전의 (x, y, width, height).
    """

    id: str
    scaled_box: tuple[int, int, int, int]
    average_difference: float
    present: bool
    contribution: float


class VerificationOutcome(BaseSchema):
    """Verification 결과

    present_ids / absent_ids는 입력 regions를 빠짐없이, 겹침 없이 분할.
    """

    present_ids: list[str]
    absent_ids: list[str]
    confidence_score: int = Field(ge=0, le=100)
    region_results: list[RegionResult] = []

    @computed_field(alias="totalRegions")  # type: ignore[prop-decorator]
    @property
    def total_regions(self) -> int:
        return len(self.present_ids) + len(self.absent_ids)

    @computed_field(alias="completionRate")  # type: ignore[prop-decorator]
    @property
    def completion_rate(self) -> float:
        """(전체 - 누락) / 전체 * 100, 영역이 없으면 100"""
        total = self.total_regions
        if total == 0:
            return 100.0
        return round((total - len(self.absent_ids)) / total * 100, 2)
