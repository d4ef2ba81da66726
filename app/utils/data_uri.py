""" 데이터 URI 변환 유틸리티 """
import base64
import binascii
import re
from typing import Tuple

from app.core.exceptions import ImageDecodeError

_DATA_URI_PATTERN = re.compile(r'^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]+)*),(?P<payload>.*)$', re.DOTALL)


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """
    데이터 URI를 (MIME 타입, 바이트)로 분해

    Args:
        data_uri: 'data:<mimetype>;base64,<encoded_data>' 형식 문자열

    Returns:
        tuple: (MIME 타입, 디코딩된 바이트)

    Raises:
        ImageDecodeError: 형식이 잘못되었거나 페이로드가 비어 있는 경우
    """
    if not isinstance(data_uri, str):
        raise ImageDecodeError("데이터 URI는 문자열이어야 합니다")

    match = _DATA_URI_PATTERN.match(data_uri.strip())
    if match is None:
        raise ImageDecodeError("잘못된 데이터 URI: 'data:' 형식이 아닙니다")

    if ';base64' not in match.group('params'):
        raise ImageDecodeError("잘못된 데이터 URI: base64 인코딩만 지원합니다")

    payload = re.sub(r'\s+', '', match.group('payload'))
    if not payload:
        raise ImageDecodeError("잘못된 데이터 URI: base64 데이터가 없습니다")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"base64 디코딩 실패: {e}") from e

    return match.group('mime') or 'application/octet-stream', data


def to_data_uri(data: bytes, mime_type: str = 'image/png') -> str:
    """바이트를 base64 데이터 URI로 인코딩"""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
