""" 이미지 처리 서비스 클래스 (라우터에서 사용하는 진입점) """
from typing import Any, Dict

from app.services.image_processing.image_analyzer import ImageAnalyzer
from app.services.image_processing.image_loader import ImageLoader, ImageSource
from app.utils.logger import setup_logger

logger = setup_logger(__name__)


class ImageProcessor:
    """이미지 처리 서비스 클래스"""

    @staticmethod
    def analyze_image(source: ImageSource) -> Dict[str, Any]:
        """이미지를 로드하고 배경 제거 파라미터를 추천"""
        image = ImageLoader.load(source)
        analysis = ImageAnalyzer.analyze_image(ImageLoader.to_array(image))

        r, g, b = analysis['background_color']
        analysis['background_color'] = {'r': r, 'g': g, 'b': b}

        logger.info(f"이미지 분석 완료: 크기={image.size}, 복잡도={analysis['complexity']}")
        return analysis
