"""
API 요청 스키마 및 처리 파라미터 정의
"""
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, Field, StringConstraints, ValidationError

from app.core.exceptions import InvalidParameterError
from config.settings import BACKGROUND_REMOVAL, BATCH, PARAMETER_LIMITS


class RGBColor(BaseModel):
    """RGB 색상"""
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)

    def as_tuple(self):
        return (self.r, self.g, self.b)


class SamplePoint(BaseModel):
    """사용자가 지정한 샘플 좌표 (배경 또는 전경)"""
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    is_background: bool = True


class ManualHints(BaseModel):
    """manual 모드에서 사용하는 배경 힌트"""
    background_color: Optional[RGBColor] = None
    sample_points: List[SamplePoint] = Field(default_factory=list)


class RemovalParameters(BaseModel):
    """배경 제거 필터 파라미터 (요청마다 전달, 저장하지 않음)"""
    threshold: float = Field(
        BACKGROUND_REMOVAL['THRESHOLD'],
        ge=PARAMETER_LIMITS['THRESHOLD'][0],
        le=PARAMETER_LIMITS['THRESHOLD'][1],
        description="색상 거리 임계값 (클수록 더 많은 픽셀이 배경으로 분류)",
    )
    smoothing: int = Field(
        BACKGROUND_REMOVAL['SMOOTHING'],
        ge=PARAMETER_LIMITS['SMOOTHING'][0],
        le=PARAMETER_LIMITS['SMOOTHING'][1],
        description="마스크 스무딩 반복 횟수",
    )
    feather_radius: int = Field(
        BACKGROUND_REMOVAL['FEATHER_RADIUS'],
        ge=PARAMETER_LIMITS['FEATHER_RADIUS'][0],
        le=PARAMETER_LIMITS['FEATHER_RADIUS'][1],
        description="경계 알파 그라데이션 폭 (픽셀)",
    )
    mode: Literal['auto', 'manual'] = BACKGROUND_REMOVAL['MODE']
    edge_detection: bool = BACKGROUND_REMOVAL['EDGE_DETECTION']
    adaptive_threshold: bool = BACKGROUND_REMOVAL['ADAPTIVE_THRESHOLD']
    manual_hints: Optional[ManualHints] = None

    @classmethod
    def build(cls, **kwargs) -> 'RemovalParameters':
        """검증 실패를 서비스 예외로 변환하여 파라미터 생성"""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise InvalidParameterError(f"잘못된 처리 파라미터: {e}") from e


class RemoveBackgroundRequest(RemovalParameters):
    """배경 제거 요청"""
    image_data_uri: str = Field(..., description="'data:<mimetype>;base64,<encoded_data>' 형식 이미지")
    return_mask: bool = True

    def to_parameters(self) -> RemovalParameters:
        return RemovalParameters(**self.model_dump(exclude={'image_data_uri', 'return_mask'}))


class BatchRemoveBackgroundRequest(BaseModel):
    """일괄 배경 제거 요청"""
    items: List[RemoveBackgroundRequest] = Field(..., min_length=1, max_length=BATCH['MAX_ITEMS'])
    parallel: bool = BATCH['PARALLEL']
    max_concurrency: int = Field(BATCH['MAX_CONCURRENCY'], ge=1)


class AnalyzeImageRequest(BaseModel):
    """이미지 분석 요청"""
    image_data_uri: str


class AIRemoveBackgroundRequest(BaseModel):
    """생성형 AI 배경 제거 요청"""
    image_data_uri: str


class AddBorderRequest(BaseModel):
    """다이컷 테두리 추가 요청"""
    image_data_uri: str
    border_color: str = Field('white', min_length=1)
    border_width: str = Field('medium', min_length=1, description="thin, medium, thick 등")


class GenerateStickerRequest(BaseModel):
    """스티커 생성 요청"""
    prompt: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
