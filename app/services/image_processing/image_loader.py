""" 이미지 디코딩/인코딩 및 입력 검증 전담 클래스 """
import io
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from app.core.exceptions import ImageDecodeError, InvalidImageError
from app.utils.data_uri import parse_data_uri, to_data_uri
from app.utils.logger import setup_logger
from config.settings import IMAGE_LIMITS

# 로거 설정
logger = setup_logger(__name__)

ImageSource = Union[Image.Image, bytes, str]


class ImageLoader:
    """이미지 디코딩/인코딩 전담 클래스"""

    @staticmethod
    def load(source: ImageSource) -> Image.Image:
        """
        PIL 이미지, 바이트, 데이터 URI 중 어떤 입력이든 검증된 RGBA 이미지로 변환

        Args:
            source: 입력 이미지

        Returns:
            Image.Image: RGBA 모드 이미지

        Raises:
            ImageDecodeError: 디코딩 실패
            InvalidImageError: 크기가 0이거나 너무 큰 이미지
        """
        if isinstance(source, Image.Image):
            image = source
        elif isinstance(source, (bytes, bytearray)):
            image = ImageLoader.decode_bytes(bytes(source))
        elif isinstance(source, str):
            image = ImageLoader.decode_data_uri(source)
        else:
            raise ImageDecodeError(f"지원하지 않는 이미지 입력 타입: {type(source).__name__}")

        ImageLoader.validate_image_size(image)
        return ImageLoader.ensure_rgba(image)

    @staticmethod
    def decode_data_uri(data_uri: str) -> Image.Image:
        """데이터 URI를 PIL 이미지로 디코딩"""
        _, data = parse_data_uri(data_uri)
        return ImageLoader.decode_bytes(data)

    @staticmethod
    def decode_bytes(data: bytes) -> Image.Image:
        """이미지 바이트를 PIL 이미지로 디코딩"""
        if not data:
            raise ImageDecodeError("이미지 데이터가 비어 있습니다")

        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError, EOFError, SyntaxError, Image.DecompressionBombError) as e:
            logger.error(f"이미지 디코딩 실패: {str(e)}")
            raise ImageDecodeError(f"이미지를 디코딩할 수 없습니다: {e}") from e

        logger.debug(f"이미지 디코딩 완료: format={image.format}, mode={image.mode}, size={image.size}")
        return image

    @staticmethod
    def validate_image_size(image: Image.Image):
        """
        이미지 크기가 유효한지 확인

        Args:
            image: 확인할 이미지

        Raises:
            InvalidImageError: 크기가 0이거나 최대 크기를 초과
        """
        width, height = image.size
        if width <= 0 or height <= 0:
            logger.error(f"유효하지 않은 이미지 크기: {image.size}")
            raise InvalidImageError(f"이미지 크기가 0입니다: {width}x{height}")

        if max(image.size) > IMAGE_LIMITS['MAX_DIMENSION']:
            raise InvalidImageError(
                f"이미지가 너무 큽니다: {width}x{height} (최대 {IMAGE_LIMITS['MAX_DIMENSION']}px)"
            )

        if max(image.size) > IMAGE_LIMITS['LARGE_IMAGE_THRESHOLD']:
            logger.warning(f"이미지가 매우 큽니다: {image.size}")

    @staticmethod
    def ensure_rgba(image: Image.Image) -> Image.Image:
        """알파 채널이 없는 이미지에 불투명 알파 채널 추가"""
        if image.mode == 'RGBA':
            return image
        if image.mode == 'I' or image.mode.startswith('I;16'):
            image = ImageLoader.to_8bit_grayscale(image)
        logger.debug(f"이미지 모드 변환: {image.mode} -> RGBA")
        return image.convert('RGBA')

    @staticmethod
    def to_8bit_grayscale(image: Image.Image) -> Image.Image:
        """
        16비트 정수 그레이스케일(I;16, I)을 8비트(L)로 변환

        Pillow의 RGBA 변환은 255를 넘는 값을 잘라내므로 상위 8비트만 사용한다.
        값이 모두 0~255인 I 모드 이미지는 그대로 유지한다.
        """
        values = np.clip(np.array(image, dtype=np.int64), 0, 65535)
        if image.mode != 'I' or values.max() > 255:
            values = values >> 8
        logger.debug(f"16비트 이미지를 8비트로 변환: mode={image.mode}, 최대값={int(values.max())}")
        return Image.fromarray(values.astype(np.uint8))

    @staticmethod
    def to_array(image: Image.Image) -> np.ndarray:
        """RGBA 이미지를 (H, W, 4) uint8 배열로 변환"""
        return np.array(ImageLoader.ensure_rgba(image), dtype=np.uint8)

    @staticmethod
    def encode_png(image: Image.Image) -> bytes:
        """이미지를 PNG 바이트로 인코딩"""
        buffer = io.BytesIO()
        image.save(buffer, format=IMAGE_LIMITS['OUTPUT_FORMAT'])
        return buffer.getvalue()

    @staticmethod
    def to_data_uri(image: Image.Image) -> str:
        """이미지를 PNG 데이터 URI로 인코딩"""
        return to_data_uri(ImageLoader.encode_png(image), IMAGE_LIMITS['OUTPUT_MIME_TYPE'])
