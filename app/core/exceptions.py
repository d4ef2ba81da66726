""" 이미지 처리 서비스 예외 정의 """


class ImageProcessingError(Exception):
    """이미지 처리 서비스의 최상위 예외"""


class ImageDecodeError(ImageProcessingError):
    """입력 이미지(데이터 URI 또는 바이트)를 디코딩할 수 없음"""


class InvalidImageError(ImageProcessingError):
    """디코딩은 되었으나 처리할 수 없는 이미지 (크기 0 등)"""


class InvalidParameterError(ImageProcessingError):
    """처리 파라미터가 허용 범위를 벗어남"""


class BackgroundRemovalError(ImageProcessingError):
    """배경 제거 필터 실행 중 예상치 못한 오류"""


class AIServiceError(ImageProcessingError):
    """생성형 AI 호출 실패 또는 응답에 이미지가 없음"""


class AIServiceUnavailableError(AIServiceError):
    """API 키가 설정되지 않아 생성형 AI를 사용할 수 없음"""
