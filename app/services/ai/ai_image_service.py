""" 생성형 AI 이미지 편집 서비스 (배경 제거, 테두리 추가, 스티커 생성) """
from typing import Optional

from app.core.exceptions import AIServiceError, InvalidParameterError
from app.core.genai_client import get_genai_client_manager
from app.services.image_processing.image_loader import ImageLoader
from app.utils.data_uri import parse_data_uri, to_data_uri
from app.utils.logger import setup_logger
from config.settings import AI

logger = setup_logger(__name__)


class AIImageService:
    """Gemini 이미지 생성 모델을 사용하는 서비스 (재시도 없음, 단일 호출)"""

    @staticmethod
    def remove_background(image_data_uri: str) -> str:
        """
        생성형 모델로 배경 제거

        Args:
            image_data_uri: 원본 이미지 데이터 URI

        Returns:
            str: 배경이 제거된 이미지 데이터 URI

        Raises:
            ImageDecodeError: 입력 이미지 디코딩 실패
            AIServiceError: 모델 호출 실패 또는 응답에 이미지 없음
        """
        prompt = AI['PROMPTS']['REMOVE_BACKGROUND']
        return AIImageService._generate(prompt, image_data_uri, 'Background removal failed')

    @staticmethod
    def add_border(image_data_uri: str, border_color: str, border_width: str) -> str:
        """배경이 제거된 이미지에 다이컷 스티커 테두리 추가"""
        prompt = AI['PROMPTS']['ADD_BORDER'].format(border_color=border_color, border_width=border_width)
        return AIImageService._generate(prompt, image_data_uri, 'Adding border failed')

    @staticmethod
    def generate_sticker(prompt: str) -> str:
        """텍스트 프롬프트로 스티커 이미지 생성"""
        if not prompt or not prompt.strip():
            raise InvalidParameterError("프롬프트가 비어 있습니다")

        full_prompt = AI['PROMPTS']['GENERATE_STICKER'].format(prompt=prompt.strip())
        return AIImageService._generate(full_prompt, None, 'Image generation failed')

    @staticmethod
    def _generate(prompt: str, image_data_uri: Optional[str], failure_message: str) -> str:
        """모델 호출 후 첫 번째 이미지 파트를 데이터 URI로 반환"""
        from google.genai import types

        contents = []
        if image_data_uri is not None:
            mime_type, data = parse_data_uri(image_data_uri)
            # 디코딩 가능한 이미지인지 먼저 확인
            ImageLoader.decode_bytes(data)
            contents.append(types.Part.from_bytes(data=data, mime_type=mime_type))
        contents.append(prompt)

        manager = get_genai_client_manager()
        client = manager.get_client()

        logger.info(f"Gemini 이미지 요청 (모델: {manager.model}, 이미지 포함: {image_data_uri is not None})")
        try:
            response = client.models.generate_content(
                model=manager.model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=AI['RESPONSE_MODALITIES']),
            )
        except Exception as e:
            logger.error(f"Gemini 호출 실패: {str(e)}")
            raise AIServiceError(f"{failure_message}: {e}") from e

        result = AIImageService._extract_image(response)
        if result is None:
            logger.error(f"Gemini 응답에 이미지가 없습니다: {failure_message}")
            raise AIServiceError(failure_message)

        logger.info("Gemini 이미지 응답 수신 완료")
        return result

    @staticmethod
    def _extract_image(response) -> Optional[str]:
        """응답의 첫 번째 인라인 이미지 데이터를 데이터 URI로 변환"""
        for candidate in getattr(response, 'candidates', None) or []:
            content = getattr(candidate, 'content', None)
            for part in getattr(content, 'parts', None) or []:
                inline_data = getattr(part, 'inline_data', None)
                if inline_data is not None and inline_data.data:
                    return to_data_uri(inline_data.data, inline_data.mime_type or 'image/png')
        return None
