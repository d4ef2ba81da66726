""" 색상 거리 기반 배경 영역 분할 (플러드 필) 전담 클래스 """
from typing import List, Optional, Tuple, Union

import numpy as np
from scipy import ndimage

from app.core.exceptions import InvalidParameterError
from app.schemas.requests import RemovalParameters
from app.services.image_processing.color_analyzer import Color, ColorAnalyzer
from app.services.image_processing.image_analyzer import ImageAnalyzer
from app.utils.logger import setup_logger
from config.settings import ADAPTIVE_THRESHOLD

# 로거 설정
logger = setup_logger(__name__)

# 4-연결 (상하좌우)
FOUR_CONNECTIVITY = ndimage.generate_binary_structure(2, 1)
# 8-연결 (대각선 포함)
EIGHT_CONNECTIVITY = ndimage.generate_binary_structure(2, 2)


class BackgroundSegmenter:
    """배경 영역 분할 전담 클래스"""

    @staticmethod
    def resolve_reference_color(rgba: np.ndarray, params: RemovalParameters) -> Color:
        """
        배경 기준 색상 결정

        auto 모드는 테두리에서 추정하고, manual 모드는 힌트 색상 또는
        배경 샘플 좌표의 평균 색상을 사용한다 (둘 다 없으면 auto와 동일).
        """
        hints = params.manual_hints
        if params.mode == 'manual' and hints is not None:
            if hints.background_color is not None:
                return hints.background_color.as_tuple()

            background_points = BackgroundSegmenter._sample_points(rgba, params, is_background=True)
            if background_points:
                return ColorAnalyzer.mean_color(rgba, background_points)

        return ColorAnalyzer.estimate_background_color(rgba)

    @staticmethod
    def threshold_map(rgba: np.ndarray, threshold: float, adaptive: bool) -> Union[float, np.ndarray]:
        """
        픽셀별 임계값 계산

        적응형이면 밝기의 지역 표준편차만큼 임계값을 올리되
        [threshold, threshold * MAX_RATIO] 범위로 제한한다.
        """
        if not adaptive:
            return float(threshold)

        local_std = ImageAnalyzer.local_stddev(rgba, ADAPTIVE_THRESHOLD['WINDOW_SIZE'])
        local = threshold + ADAPTIVE_THRESHOLD['NOISE_WEIGHT'] * local_std
        local = np.clip(local, threshold, threshold * ADAPTIVE_THRESHOLD['MAX_RATIO'])

        logger.debug(f"적응형 임계값: 범위 {float(local.min()):.1f} ~ {float(local.max()):.1f}")
        return local

    @staticmethod
    def find_candidates(
        rgba: np.ndarray,
        reference: Color,
        thresholds: Union[float, np.ndarray]
    ) -> np.ndarray:
        """기준색과의 거리가 임계값 이하이거나 완전히 투명한 픽셀"""
        distance = ColorAnalyzer.color_distance(rgba, reference)
        return (distance <= thresholds) | (rgba[..., 3] == 0)

    @staticmethod
    def seed_mask(rgba: np.ndarray, params: RemovalParameters) -> np.ndarray:
        """플러드 필 시작점 (manual 배경 샘플 좌표 또는 이미지 테두리)"""
        h, w = rgba.shape[:2]
        seeds = np.zeros((h, w), dtype=bool)

        background_points = []
        if params.mode == 'manual':
            background_points = BackgroundSegmenter._sample_points(rgba, params, is_background=True)

        if background_points:
            for x, y in background_points:
                seeds[y, x] = True
        else:
            seeds[0, :] = seeds[-1, :] = True
            seeds[:, 0] = seeds[:, -1] = True

        return seeds

    @staticmethod
    def grow_background(
        candidates: np.ndarray,
        seeds: np.ndarray,
        barrier: Optional[np.ndarray] = None,
        protected: Optional[np.ndarray] = None
    ) -> np.ndarray:
        """
        시작점과 4-연결된 후보 영역을 배경으로 확장

        Args:
            candidates: 배경 후보 픽셀
            seeds: 시작점
            barrier: 확장을 막는 픽셀 (에지)
            protected: 이 픽셀을 포함하는 영역은 전경으로 유지

        Returns:
            np.ndarray: 배경 여부 (bool)
        """
        passable = candidates & ~barrier if barrier is not None else candidates
        labels, count = ndimage.label(passable, structure=FOUR_CONNECTIVITY)
        if count == 0:
            return np.zeros_like(candidates, dtype=bool)

        seed_labels = set(np.unique(labels[seeds]).tolist()) - {0}
        if protected is not None and protected.any():
            seed_labels -= set(np.unique(labels[protected]).tolist())

        background = np.isin(labels, list(seed_labels))

        if barrier is not None and background.any():
            # 에지 위의 후보 픽셀 중 배경과 맞닿은 것만 다시 포함
            reachable = candidates & (barrier | background)
            background = ndimage.binary_dilation(
                background,
                structure=EIGHT_CONNECTIVITY,
                iterations=0,
                mask=reachable,
            )

        return background

    @staticmethod
    def segment(rgba: np.ndarray, params: RemovalParameters, reference: Color) -> np.ndarray:
        """
        전경 마스크 생성

        Args:
            rgba: (H, W, 4) 이미지 배열
            params: 처리 파라미터
            reference: 배경 기준 색상

        Returns:
            np.ndarray: 전경 여부 (bool), True = 전경
        """
        thresholds = BackgroundSegmenter.threshold_map(rgba, params.threshold, params.adaptive_threshold)
        candidates = BackgroundSegmenter.find_candidates(rgba, reference, thresholds)
        seeds = BackgroundSegmenter.seed_mask(rgba, params)

        barrier = ImageAnalyzer.detect_edges(rgba) if params.edge_detection else None
        protected = BackgroundSegmenter._protected_mask(rgba, params)

        background = BackgroundSegmenter.grow_background(candidates, seeds, barrier, protected)
        logger.debug(
            f"분할 완료 - 후보: {int(candidates.sum())}, 배경: {int(background.sum())}, "
            f"전체: {background.size}"
        )
        return ~background

    @staticmethod
    def _protected_mask(rgba: np.ndarray, params: RemovalParameters) -> Optional[np.ndarray]:
        """manual 모드의 전경 샘플 좌표"""
        if params.mode != 'manual':
            return None

        points = BackgroundSegmenter._sample_points(rgba, params, is_background=False)
        if not points:
            return None

        protected = np.zeros(rgba.shape[:2], dtype=bool)
        for x, y in points:
            protected[y, x] = True
        return protected

    @staticmethod
    def _sample_points(rgba: np.ndarray, params: RemovalParameters, is_background: bool) -> List[Tuple[int, int]]:
        """힌트 샘플 좌표 중 지정한 종류만 (x, y) 목록으로 반환"""
        hints = params.manual_hints
        if hints is None:
            return []

        h, w = rgba.shape[:2]
        points = []
        for i, point in enumerate(hints.sample_points):
            if point.is_background != is_background:
                continue
            if point.x >= w or point.y >= h:
                raise InvalidParameterError(
                    f"샘플 좌표 #{i+1}이 이미지 범위를 벗어났습니다: ({point.x}, {point.y}), 이미지 크기: {w}x{h}"
                )
            points.append((point.x, point.y))
        return points
