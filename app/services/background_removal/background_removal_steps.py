""" 배경 제거 과정의 단계별 로직 관리 """
import numpy as np
from PIL import Image

from app.schemas.requests import RemovalParameters
from app.services.image_processing.background_segmenter import BackgroundSegmenter
from app.services.image_processing.color_analyzer import Color
from app.services.image_processing.image_loader import ImageLoader, ImageSource
from app.services.image_processing.mask_processor import MaskProcessor
from app.utils.logger import setup_logger
from config.settings import BACKGROUND_REMOVAL

logger = setup_logger(__name__)

class BackgroundRemovalSteps:
    """배경 제거 과정의 단계별 로직을 관리하는 클래스"""

    # 클래스 레벨에서 단계 수 관리
    TOTAL_STEPS = BACKGROUND_REMOVAL['TOTAL_STEPS']

    @staticmethod
    def _log_step(image_id: str, step: int, description: str):
        """단계별 로그를 일관된 형식으로 출력"""
        logger.info(f"[{image_id}] {step}/{BackgroundRemovalSteps.TOTAL_STEPS}: {description}")

    @staticmethod
    def load_image(source: ImageSource, image_id: str) -> Image.Image:
        """1단계: 이미지 디코딩 및 RGBA 변환"""
        BackgroundRemovalSteps._log_step(image_id, 1, "이미지 로드")

        image = ImageLoader.load(source)

        logger.debug(f"[{image_id}] 처리 크기: {image.size}")
        return image

    @staticmethod
    def estimate_background(rgba: np.ndarray, params: RemovalParameters, image_id: str) -> Color:
        """2단계: 배경 기준 색상 결정"""
        BackgroundRemovalSteps._log_step(image_id, 2, f"배경색 추정 ({params.mode})")

        reference = BackgroundSegmenter.resolve_reference_color(rgba, params)

        logger.debug(f"[{image_id}] 배경 기준 색상: {reference}")
        return reference

    @staticmethod
    def classify_pixels(
        rgba: np.ndarray,
        params: RemovalParameters,
        reference: Color,
        image_id: str
    ) -> np.ndarray:
        """3~4단계: 픽셀 분류 및 에지 기반 경계 보정"""
        mode = "적응형" if params.adaptive_threshold else "전역"
        BackgroundRemovalSteps._log_step(image_id, 3, f"픽셀 분류 ({mode} 임계값 {params.threshold:g})")
        if params.edge_detection:
            BackgroundRemovalSteps._log_step(image_id, 4, "에지 기반 경계 보정")

        foreground = BackgroundSegmenter.segment(rgba, params, reference)

        logger.debug(f"[{image_id}] 전경 비율: {float(foreground.mean()):.1%}")
        return foreground

    @staticmethod
    def smooth_mask(foreground: np.ndarray, params: RemovalParameters, image_id: str) -> np.ndarray:
        """5단계: 마스크 스무딩"""
        BackgroundRemovalSteps._log_step(image_id, 5, f"마스크 스무딩 ({params.smoothing}회)")
        return MaskProcessor.smooth_mask(foreground, params.smoothing)

    @staticmethod
    def feather_and_apply(
        image: Image.Image,
        foreground: np.ndarray,
        params: RemovalParameters,
        image_id: str
    ):
        """6단계: 페더링 및 알파 채널 적용"""
        BackgroundRemovalSteps._log_step(image_id, 6, f"페더링 및 마스크 적용 (반경 {params.feather_radius})")

        soft_mask = MaskProcessor.feather_mask(foreground, params.feather_radius)
        result = MaskProcessor.apply_mask_to_image(image, soft_mask)

        logger.debug(f"[{image_id}] 마스크 적용 완료")
        return result, soft_mask
