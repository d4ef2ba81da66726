""" 마스크 처리 전담 클래스 """
import numpy as np
import cv2
from PIL import Image

from app.utils.logger import setup_logger
from config.settings import BACKGROUND_REMOVAL

# 로거 설정
logger = setup_logger(__name__)


class MaskProcessor:
    """마스크 처리 전담 클래스"""

    @staticmethod
    def smooth_mask(mask: np.ndarray, passes: int, kernel_size: int = None) -> np.ndarray:
        """
        형태학적 연산을 통한 마스크 스무딩

        한 번의 패스는 Opening(잡티 제거) 후 Closing(구멍 메우기)이다.

        Args:
            mask: 전경 마스크 (bool)
            passes: 반복 횟수 (0이면 그대로 반환)
            kernel_size: 커널 크기 (기본값: BACKGROUND_REMOVAL['SMOOTHING_KERNEL_SIZE'])

        Returns:
            numpy.ndarray: 정제된 마스크 (bool)
        """
        if passes <= 0:
            return mask.astype(bool)

        if kernel_size is None:
            kernel_size = BACKGROUND_REMOVAL['SMOOTHING_KERNEL_SIZE']

        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (kernel_size, kernel_size))
        refined = mask.astype(np.uint8) * 255

        for _ in range(passes):
            # Opening으로 노이즈 제거
            refined = cv2.morphologyEx(refined, cv2.MORPH_OPEN, kernel)
            # Closing으로 구멍 메우기
            refined = cv2.morphologyEx(refined, cv2.MORPH_CLOSE, kernel)

        logger.debug(f"마스크 스무딩 완료 (passes={passes}, kernel={kernel_size})")
        return refined > 0

    @staticmethod
    def feather_mask(mask: np.ndarray, radius: int) -> np.ndarray:
        """
        경계를 알파 그라데이션으로 변환

        전경 내부에서 배경까지의 거리 d에 대해 alpha = min(1, d / radius).
        배경 픽셀은 항상 0이고, radius가 0이면 이진 마스크를 그대로 반환한다.

        Args:
            mask: 전경 마스크 (bool)
            radius: 페더링 반경 (픽셀)

        Returns:
            numpy.ndarray: [0, 1] 범위의 float32 마스크
        """
        foreground = mask.astype(bool)
        if radius <= 0 or foreground.all() or not foreground.any():
            return foreground.astype(np.float32)

        distance = cv2.distanceTransform(
            foreground.astype(np.uint8),
            cv2.DIST_L2,
            cv2.DIST_MASK_PRECISE
        )
        soft_mask = np.clip(distance / float(radius), 0.0, 1.0).astype(np.float32)

        logger.debug(f"페더링 완료 (radius={radius})")
        return soft_mask

    @staticmethod
    def apply_mask_to_image(image: Image.Image, mask: np.ndarray) -> Image.Image:
        """
        마스크를 이미지에 적용하여 배경이 제거된 결과 반환

        결과 알파 = min(마스크 x 255, 원본 알파), RGB는 유지한다.
        이미 페더링된 결과를 다시 넣어도 경계 알파가 더 낮아지지 않는다.

        Args:
            image: 원본 이미지
            mask: [0, 1] 범위 마스크

        Returns:
            Image.Image: RGBA 이미지
        """
        rgba = np.array(image.convert('RGBA'), dtype=np.uint8)
        if mask.shape != rgba.shape[:2]:
            raise ValueError(f"마스크 크기 불일치: {mask.shape} != {rgba.shape[:2]}")

        alpha = np.clip(np.rint(mask.astype(np.float32) * 255.0), 0, 255).astype(np.uint8)
        rgba[..., 3] = np.minimum(alpha, rgba[..., 3])

        logger.debug("마스크 적용 완료")
        return Image.fromarray(rgba)

    @staticmethod
    def mask_to_image(mask: np.ndarray) -> Image.Image:
        """[0, 1] 마스크를 그레이스케일(L) 이미지로 변환"""
        return Image.fromarray(np.clip(np.rint(mask * 255), 0, 255).astype(np.uint8))
