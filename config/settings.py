import os
import multiprocessing

# =============================================================================
# 이미지 입력 관련 설정
# =============================================================================

# 이미지 크기 제한
IMAGE_LIMITS = {
    'MAX_DIMENSION': 8192,          # 한 변의 최대 픽셀 수
    'LARGE_IMAGE_THRESHOLD': 2000,  # 대용량 이미지 기준 (경고 로그)
    'OUTPUT_FORMAT': 'PNG',
    'OUTPUT_MIME_TYPE': 'image/png',
}

# 이미지 분석 파라미터
IMAGE_ANALYSIS = {
    'SIMPLE_STDDEV': 40,            # 이보다 작으면 단순한 이미지
    'COMPLEX_STDDEV': 70,           # 이보다 크면 복잡한 이미지
    'SUGGESTED_THRESHOLDS': {
        'simple': 20,
        'medium': 30,
        'complex': 45,
    },
}

# =============================================================================
# 배경 제거 관련 설정
# =============================================================================

# 파라미터 허용 범위
PARAMETER_LIMITS = {
    'THRESHOLD': (0, 255),
    'SMOOTHING': (0, 10),
    'FEATHER_RADIUS': (0, 20),
}

# 배경 제거 기본값
BACKGROUND_REMOVAL = {
    'TOTAL_STEPS': 6,               # 처리 단계 수
    'THRESHOLD': 30,                # 색상 거리 임계값
    'SMOOTHING': 2,                 # 마스크 스무딩 반복 횟수
    'FEATHER_RADIUS': 3,            # 페더링 반경 (픽셀)
    'MODE': 'auto',
    'EDGE_DETECTION': False,
    'ADAPTIVE_THRESHOLD': False,
    'BORDER_QUANTIZATION': 16,      # 테두리 색상 양자화 단위
    'SMOOTHING_KERNEL_SIZE': 3,     # Opening/Closing 커널 크기
    'TECHNIQUE': 'Flood Fill Segmentation with Edge Refinement',
}

# 적응형 임계값 설정
ADAPTIVE_THRESHOLD = {
    'WINDOW_SIZE': 15,              # 지역 통계 창 크기 (홀수)
    'NOISE_WEIGHT': 1.5,            # 지역 표준편차 가중치
    'MAX_RATIO': 2.0,               # 전역 임계값 대비 최대 배율
}

# 에지 검출 설정
EDGE_DETECTION = {
    'CANNY_THRESHOLD_LOW': 50,
    'CANNY_THRESHOLD_HIGH': 150,
}

# 프리셋 (이미지 편집기의 Simple / Standard / Complex 버튼)
PRESETS = {
    'simple': {'threshold': 15, 'smoothing': 1, 'feather_radius': 2},
    'standard': {'threshold': 30, 'smoothing': 2, 'feather_radius': 3},
    'complex': {'threshold': 50, 'smoothing': 3, 'feather_radius': 5},
}

# 일괄 처리 설정
BATCH = {
    'PARALLEL': True,
    'MAX_CONCURRENCY': 4,
    'MAX_ITEMS': 20,
}

# =============================================================================
# 생성형 AI 관련 설정
# =============================================================================

AI = {
    'API_KEY_ENV_VARS': ('GEMINI_API_KEY', 'GOOGLE_API_KEY'),
    'IMAGE_MODEL': os.getenv('GEMINI_IMAGE_MODEL', 'gemini-2.0-flash-preview-image-generation'),
    'RESPONSE_MODALITIES': ['TEXT', 'IMAGE'],
    'PROMPTS': {
        'REMOVE_BACKGROUND': (
            'Remove the background of this image. '
            'The output should be the subject on a transparent background.'
        ),
        'ADD_BORDER': (
            'Add a {border_width} {border_color} die-cut sticker border to the subject of this image. '
            'The background must be transparent.'
        ),
        'GENERATE_STICKER': (
            'A die-cut sticker of {prompt}, vector art, vibrant colors, on a transparent background.'
        ),
    },
}

# =============================================================================
# 서비스 및 처리 관련 설정
# =============================================================================

# API 서버 설정
API_CONFIG = {
    'MAX_CONCURRENT_REQUESTS': 2,       # 동시 처리 요청 수
}

# 병렬 처리 설정
THREAD_POOL = {
    'MAX_WORKERS': min(32, multiprocessing.cpu_count() + 4),
}

# 로깅 설정
LOGGING = {
    'LEVEL': 'INFO',
    'FORMAT': '[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s',
    'DATE_FORMAT': '%Y-%m-%d %H:%M:%S',
    'COLORS': {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }
}
