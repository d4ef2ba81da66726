""" 이미지 분석 전담 클래스 """
from typing import Any, Dict

import numpy as np
import cv2

from app.services.image_processing.color_analyzer import ColorAnalyzer
from app.utils.logger import setup_logger
from config.settings import EDGE_DETECTION, IMAGE_ANALYSIS

# 로거 설정
logger = setup_logger(__name__)


class ImageAnalyzer:
    """이미지 분석 전담 클래스"""

    @staticmethod
    def to_grayscale(rgba: np.ndarray) -> np.ndarray:
        """RGBA 배열을 그레이스케일(uint8)로 변환"""
        return cv2.cvtColor(np.ascontiguousarray(rgba[..., :3]), cv2.COLOR_RGB2GRAY)

    @staticmethod
    def detect_edges(rgba: np.ndarray, low_threshold=None, high_threshold=None) -> np.ndarray:
        """
        이미지에서 에지 검출

        Args:
            rgba: (H, W, 4) 이미지 배열
            low_threshold: Canny 하한 임계값
            high_threshold: Canny 상한 임계값

        Returns:
            numpy.ndarray: 에지 여부 (bool)
        """
        if low_threshold is None:
            low_threshold = EDGE_DETECTION['CANNY_THRESHOLD_LOW']
        if high_threshold is None:
            high_threshold = EDGE_DETECTION['CANNY_THRESHOLD_HIGH']

        gray = ImageAnalyzer.to_grayscale(rgba)
        edges = cv2.Canny(gray, low_threshold, high_threshold) > 0

        logger.debug(f"에지 검출 완료: {int(np.sum(edges))}개 에지 픽셀")
        return edges

    @staticmethod
    def local_stddev(rgba: np.ndarray, window_size: int) -> np.ndarray:
        """밝기의 지역 표준편차 (window_size x window_size 창)"""
        gray = ImageAnalyzer.to_grayscale(rgba).astype(np.float32)
        ksize = (window_size, window_size)

        mean = cv2.blur(gray, ksize, borderType=cv2.BORDER_REFLECT)
        mean_sq = cv2.blur(gray * gray, ksize, borderType=cv2.BORDER_REFLECT)
        variance = np.maximum(mean_sq - mean * mean, 0.0)

        return np.sqrt(variance)

    @staticmethod
    def analyze_image(rgba: np.ndarray) -> Dict[str, Any]:
        """
        이미지를 분석하여 배경 제거 파라미터 추천

        Args:
            rgba: (H, W, 4) 이미지 배열

        Returns:
            dict: suggested_threshold, background_color, complexity
        """
        background_color = ColorAnalyzer.corner_color(rgba)
        stddev = ColorAnalyzer.channel_stddev(rgba)

        if stddev < IMAGE_ANALYSIS['SIMPLE_STDDEV']:
            complexity = 'simple'
        elif stddev > IMAGE_ANALYSIS['COMPLEX_STDDEV']:
            complexity = 'complex'
        else:
            complexity = 'medium'

        suggested_threshold = IMAGE_ANALYSIS['SUGGESTED_THRESHOLDS'][complexity]

        logger.debug(f"이미지 분석 결과 - 표준편차: {stddev:.1f}, 복잡도: {complexity}, 추천 임계값: {suggested_threshold}")
        return {
            'suggested_threshold': suggested_threshold,
            'background_color': background_color,
            'complexity': complexity,
        }
