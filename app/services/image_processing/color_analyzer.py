""" 색상 거리 계산 및 배경색 추정 전담 클래스 """
from typing import Tuple

import numpy as np

from app.utils.logger import setup_logger
from config.settings import BACKGROUND_REMOVAL

# 로거 설정
logger = setup_logger(__name__)

Color = Tuple[int, int, int]


class ColorAnalyzer:
    """색상 분석 전담 클래스"""

    @staticmethod
    def color_distance(pixels: np.ndarray, reference: Color) -> np.ndarray:
        """
        가중 유클리드 거리("redmean")로 지각적 색상 차이 계산

        Args:
            pixels: (..., 3) 또는 (..., 4) 픽셀 배열
            reference: 기준 RGB 색상

        Returns:
            np.ndarray: 픽셀별 거리 (float32, 입력과 같은 공간 크기)
        """
        rgb = pixels[..., :3].astype(np.float32)
        ref = np.asarray(reference, dtype=np.float32)

        r_mean = (rgb[..., 0] + ref[0]) / 2.0
        delta = rgb - ref

        weight_r = 2.0 + r_mean / 256.0
        weight_g = 4.0
        weight_b = 2.0 + (255.0 - r_mean) / 256.0

        return np.sqrt(
            weight_r * delta[..., 0] ** 2 +
            weight_g * delta[..., 1] ** 2 +
            weight_b * delta[..., 2] ** 2
        )

    @staticmethod
    def border_pixels(rgba: np.ndarray) -> np.ndarray:
        """이미지 테두리(상하좌우 1픽셀) 픽셀을 (N, 4) 배열로 반환"""
        h, w = rgba.shape[:2]
        border = np.zeros((h, w), dtype=bool)
        border[0, :] = border[-1, :] = True
        border[:, 0] = border[:, -1] = True
        return rgba[border]

    @staticmethod
    def estimate_background_color(rgba: np.ndarray) -> Color:
        """
        테두리에서 가장 빈도가 높은 색상을 배경색으로 추정

        색상을 양자화한 뒤 가장 많은 구간에 속한 픽셀들의 평균을 사용한다.
        테두리가 전부 투명하면 네 모서리 평균을 사용한다.

        Args:
            rgba: (H, W, 4) uint8 배열

        Returns:
            tuple: 추정 배경색 (r, g, b)
        """
        border = ColorAnalyzer.border_pixels(rgba)
        visible = border[border[:, 3] > 0]

        if len(visible) == 0:
            logger.debug("테두리가 모두 투명함, 모서리 평균 사용")
            return ColorAnalyzer.corner_color(rgba)

        step = BACKGROUND_REMOVAL['BORDER_QUANTIZATION']
        bins = visible[:, :3] // step
        unique_bins, inverse, counts = np.unique(bins, axis=0, return_inverse=True, return_counts=True)
        dominant = np.argmax(counts)
        members = visible[inverse.reshape(-1) == dominant, :3]

        color = tuple(int(round(c)) for c in members.mean(axis=0))
        logger.debug(
            f"배경색 추정: {color} (테두리 {len(visible)}픽셀 중 {counts[dominant]}픽셀, "
            f"색상 구간 {len(unique_bins)}개)"
        )
        return color

    @staticmethod
    def corner_color(rgba: np.ndarray) -> Color:
        """네 모서리 픽셀의 평균 색상"""
        h, w = rgba.shape[:2]
        corners = np.array([
            rgba[0, 0, :3],
            rgba[0, w - 1, :3],
            rgba[h - 1, 0, :3],
            rgba[h - 1, w - 1, :3],
        ], dtype=np.float32)
        return tuple(int(round(c)) for c in corners.mean(axis=0))

    @staticmethod
    def mean_color(rgba: np.ndarray, points) -> Color:
        """지정한 (x, y) 좌표들의 평균 색상"""
        samples = np.array([rgba[y, x, :3] for x, y in points], dtype=np.float32)
        return tuple(int(round(c)) for c in samples.mean(axis=0))

    @staticmethod
    def channel_stddev(rgba: np.ndarray) -> float:
        """RGB 채널 표준편차의 평균 (이미지 복잡도 지표)"""
        rgb = rgba[..., :3].reshape(-1, 3).astype(np.float32)
        return float(rgb.std(axis=0).mean())
