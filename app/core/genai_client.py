""" Google Gemini 클라이언트 관리를 담당하는 모듈 """
import os
import threading
from typing import Optional

from app.core.exceptions import AIServiceUnavailableError
from app.utils.logger import setup_logger
from config.settings import AI

logger = setup_logger(__name__)


def resolve_api_key(explicit: Optional[str] = None, *env_names: str) -> str:
    """명시적으로 전달된 키를 우선하고, 없으면 환경 변수에서 처음으로 비어 있지 않은 값 반환"""
    if explicit and explicit.strip():
        return explicit.strip()

    for name in env_names or AI['API_KEY_ENV_VARS']:
        value = os.environ.get(name, '').strip()
        if value:
            return value
    return ''


class GenAIClientManager:
    """생성형 AI 클라이언트를 관리하는 싱글톤 클래스"""

    _instance: Optional['GenAIClientManager'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'GenAIClientManager':
        """싱글톤 패턴 구현"""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """인스턴스 초기화"""
        self.client = None
        self.client_lock = threading.Lock()
        self.model = AI['IMAGE_MODEL']

    @property
    def available(self) -> bool:
        """API 키 설정 여부"""
        return self.client is not None or bool(resolve_api_key())

    def get_client(self):
        """Gemini 클라이언트 반환 (필요시 초기화, 스레드 안전)"""
        # 빠른 체크 (Double-checked locking pattern)
        if self.client is not None:
            return self.client

        with self.client_lock:
            if self.client is None:
                api_key = resolve_api_key()
                if not api_key:
                    raise AIServiceUnavailableError(
                        f"Gemini API 키가 없습니다. {' 또는 '.join(AI['API_KEY_ENV_VARS'])}를 설정하세요."
                    )

                from google import genai
                self.client = genai.Client(api_key=api_key)
                logger.info(f"Gemini 클라이언트 초기화 완료 (모델: {self.model})")

        return self.client


# 싱글톤 인스턴스 제공 함수
def get_genai_client_manager() -> GenAIClientManager:
    """클라이언트 관리자 싱글톤 인스턴스 반환"""
    return GenAIClientManager()
