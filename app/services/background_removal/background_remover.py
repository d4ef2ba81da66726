""" 배경 제거 서비스 메인 클래스 """
import os
import time
import traceback
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np
from PIL import Image

from app.core.exceptions import BackgroundRemovalError, ImageProcessingError
from app.schemas.requests import ManualHints, RemovalParameters
from app.services.background_removal.background_removal_steps import BackgroundRemovalSteps
from app.services.image_processing.image_loader import ImageLoader, ImageSource
from app.services.image_processing.mask_processor import MaskProcessor
from app.utils.logger import setup_logger
from config.settings import BACKGROUND_REMOVAL

logger = setup_logger(__name__)


@dataclass
class RemovalResult:
    """배경 제거 결과 (출력 이미지, 선택적 마스크, 메타데이터)"""
    image: Image.Image
    mask: Optional[Image.Image] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """응답용 딕셔너리 (이미지는 PNG 데이터 URI)"""
        return {
            'image_data_uri': ImageLoader.to_data_uri(self.image),
            'mask_data_uri': ImageLoader.to_data_uri(self.mask) if self.mask is not None else None,
            'metadata': self.metadata,
        }


class BackgroundRemover:
    """배경 제거 서비스 메인 클래스"""

    @staticmethod
    def remove_background(
        image: ImageSource,
        params: RemovalParameters,
        image_name: str = 'image',
        return_mask: bool = True
    ) -> RemovalResult:
        """
        색상 기반 분할로 이미지 배경 제거

        Args:
            image: 원본 이미지 (PIL 이미지, 바이트 또는 데이터 URI)
            params: 처리 파라미터
            image_name: 로그용 이미지 이름
            return_mask: 마스크 이미지 반환 여부

        Returns:
            RemovalResult: 배경이 제거된 이미지와 마스크

        Raises:
            ImageProcessingError: 디코딩 실패, 잘못된 입력 또는 처리 중 오류
        """
        image_id = os.path.basename(image_name) or 'image'
        start_time = time.perf_counter()

        try:
            logger.info(f"[{image_id}] 배경 제거 시작")
            BackgroundRemover._log_input_info(image_id, params)

            result = BackgroundRemover._execute_pipeline(image, params, image_id, return_mask)

            elapsed_ms = (time.perf_counter() - start_time) * 1000
            result.metadata['processing_time_ms'] = round(elapsed_ms, 2)

            logger.info(f"[{image_id}] 배경 제거 완료 ({elapsed_ms:.1f}ms)")
            return result

        except ImageProcessingError as e:
            logger.error(f"[{image_id}] 배경 제거 실패: {str(e)}")
            raise
        except Exception as e:
            raise BackgroundRemover._handle_error(e, image_id) from e

    @staticmethod
    def _log_input_info(image_id: str, params: RemovalParameters):
        """입력 파라미터를 로그에 기록"""
        logger.info(
            f"[{image_id}] 입력 - threshold={params.threshold:g}, smoothing={params.smoothing}, "
            f"feather_radius={params.feather_radius}, mode={params.mode}"
        )
        if logger.isEnabledFor(10):  # DEBUG level
            logger.debug(
                f"[{image_id}] edge_detection={params.edge_detection}, "
                f"adaptive_threshold={params.adaptive_threshold}, manual_hints={params.manual_hints}"
            )

    @staticmethod
    def _execute_pipeline(
        source: ImageSource,
        params: RemovalParameters,
        image_id: str,
        return_mask: bool
    ) -> RemovalResult:
        """배경 제거 파이프라인 실행"""
        # 1. 이미지 로드
        image = BackgroundRemovalSteps.load_image(source, image_id)
        rgba = ImageLoader.to_array(image)

        # 2. 배경 기준 색상
        reference = BackgroundRemovalSteps.estimate_background(rgba, params, image_id)

        # 3~4. 픽셀 분류 및 경계 보정
        foreground = BackgroundRemovalSteps.classify_pixels(rgba, params, reference, image_id)

        # 5. 스무딩
        foreground = BackgroundRemovalSteps.smooth_mask(foreground, params, image_id)

        # 6. 페더링 및 적용
        output, soft_mask = BackgroundRemovalSteps.feather_and_apply(image, foreground, params, image_id)

        BackgroundRemover._log_mask_stats(image_id, soft_mask)

        return RemovalResult(
            image=output,
            mask=MaskProcessor.mask_to_image(soft_mask) if return_mask else None,
            metadata={
                'dimensions': {'width': image.width, 'height': image.height},
                'technique': BACKGROUND_REMOVAL['TECHNIQUE'],
                'background_color': dict(zip('rgb', reference)),
            },
        )

    @staticmethod
    def _log_mask_stats(image_id: str, mask: np.ndarray):
        """마스크 통계를 로그에 기록"""
        if logger.isEnabledFor(10):  # DEBUG level
            logger.debug(
                f"[{image_id}] 마스크 통계: 평균={float(mask.mean()):.3f}, "
                f"투명={float(np.mean(mask == 0)):.1%}, 불투명={float(np.mean(mask == 1)):.1%}"
            )

    @staticmethod
    def _handle_error(e: Exception, image_id: str) -> BackgroundRemovalError:
        """예상치 못한 오류를 서비스 예외로 변환"""
        logger.error(f"[{image_id}] 배경 제거 중 오류 발생: {str(e)}")

        if logger.isEnabledFor(10):  # DEBUG level
            logger.debug(f"[{image_id}] 전체 스택 트레이스:\n{traceback.format_exc()}")

        return BackgroundRemovalError(f"배경 제거 실패: {e}")


def remove_background(
    image: ImageSource,
    threshold: float = BACKGROUND_REMOVAL['THRESHOLD'],
    smoothing: int = BACKGROUND_REMOVAL['SMOOTHING'],
    feather_radius: int = BACKGROUND_REMOVAL['FEATHER_RADIUS'],
    mode: str = BACKGROUND_REMOVAL['MODE'],
    edge_detection: bool = BACKGROUND_REMOVAL['EDGE_DETECTION'],
    adaptive_threshold: bool = BACKGROUND_REMOVAL['ADAPTIVE_THRESHOLD'],
    manual_hints: Optional[ManualHints] = None,
    return_mask: bool = True,
    image_name: str = 'image'
) -> RemovalResult:
    """개별 파라미터로 배경 제거를 호출하는 함수형 인터페이스"""
    params = RemovalParameters.build(
        threshold=threshold,
        smoothing=smoothing,
        feather_radius=feather_radius,
        mode=mode,
        edge_detection=edge_detection,
        adaptive_threshold=adaptive_threshold,
        manual_hints=manual_hints,
    )
    return BackgroundRemover.remove_background(image, params, image_name, return_mask)
