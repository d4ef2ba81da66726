""" 배경 제거 파라미터 프리셋 """
from typing import Dict

from app.core.exceptions import InvalidParameterError
from app.schemas.requests import RemovalParameters
from config.settings import PRESETS


def get_preset(name: str) -> RemovalParameters:
    """
    이름으로 프리셋 파라미터 조회

    편집기는 항상 에지 검출과 적응형 임계값을 켠 상태로 요청하므로
    프리셋도 두 옵션을 활성화한다.

    Raises:
        InvalidParameterError: 알 수 없는 프리셋 이름
    """
    key = (name or '').strip().lower()
    if key not in PRESETS:
        raise InvalidParameterError(f"알 수 없는 프리셋: '{name}' (사용 가능: {', '.join(PRESETS)})")

    return RemovalParameters(
        **PRESETS[key],
        edge_detection=True,
        adaptive_threshold=True,
    )


def list_presets() -> Dict[str, RemovalParameters]:
    """모든 프리셋 반환"""
    return {name: get_preset(name) for name in PRESETS}
