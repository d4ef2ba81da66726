"""
API 응답 스키마 정의
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

from app.schemas.requests import RGBColor, RemovalParameters


class Dimensions(BaseModel):
    width: int
    height: int


class RemovalMetadata(BaseModel):
    """배경 제거 결과 메타데이터"""
    processing_time_ms: float
    dimensions: Dimensions
    technique: str
    background_color: RGBColor


class RemoveBackgroundResponse(BaseModel):
    image_data_uri: str
    mask_data_uri: Optional[str] = None
    metadata: RemovalMetadata


class BatchRemoveBackgroundResponse(BaseModel):
    results: List[RemoveBackgroundResponse]


class ImageAnalysisResponse(BaseModel):
    """이미지 분석 결과 (추천 파라미터)"""
    suggested_threshold: int
    background_color: RGBColor
    complexity: Literal['simple', 'medium', 'complex']


class PresetsResponse(BaseModel):
    presets: Dict[str, RemovalParameters]


class AIImageResponse(BaseModel):
    image_data_uri: str
