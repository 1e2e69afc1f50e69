class Detection:
    MIN_AREA = 500  # 센서 노이즈/조명 변화 필터
    THRESHOLD = 30  # 0-255 그레이스케일 차이
    CONNECTIVITY = 8
    MASK_COLOR = (255, 0, 0, 255)  # RGBA


class Verification:
    THRESHOLD = 30.0
    NEUTRAL_CONFIDENCE = 50.0  # threshold 경계에서의 기여도
    MAX_CONFIDENCE = 100.0


class OverlayStyle:
    ABSENT_FILL = (255, 0, 0, 64)  # rgba(255, 0, 0, 0.25)
    ABSENT_BORDER = (255, 0, 0, 204)  # rgba(255, 0, 0, 0.8)
    ABSENT_BORDER_WIDTH = 3
    LABEL_BAR = (255, 255, 255, 242)  # rgba(255, 255, 255, 0.95)
    LABEL_BAR_HEIGHT = 28
    LABEL_TEXT = (220, 38, 38, 255)
    LABEL_FONT_SIZE = 16
    PRESENT_CHECK = (34, 197, 94, 255)
    PRESENT_CHECK_WIDTH = 4
    PREVIEW_OUTLINE = (255, 0, 0, 255)
    PREVIEW_OUTLINE_WIDTH = 3


class Limits:
    MAX_PIXELS = 40_000_000  # 최신 폰 사진(~12MP) 여유 포함
    MAX_REGIONS = 500
