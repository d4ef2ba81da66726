""" FastAPI 애플리케이션 생성 및 초기화를 담당하는 모듈 """
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.utils.logger import setup_logger, configure_library_loggers
from config.environments import current_env

# 로거 설정
logger = setup_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 시 공유 자원 관리"""
    from app.core.genai_client import get_genai_client_manager
    from app.core.parallel_executor import get_executor_manager

    # 스레드 풀은 시작 시 한 번만 생성
    get_executor_manager().get_executor()

    if not get_genai_client_manager().available:
        logger.warning("Gemini API 키가 설정되지 않았습니다. /ai 엔드포인트는 503을 반환합니다.")

    yield

    get_executor_manager().shutdown()
    logger.info("애플리케이션 종료")

def configure_cors(app: FastAPI):
    """CORS 미들웨어를 설정하는 함수"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=current_env['CORS_ORIGINS'],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
        max_age=3600,
    )
    logger.info("CORS 설정이 완료되었습니다")

def configure_logging():
    """로깅 레벨을 조정하는 함수"""
    configure_library_loggers()
    logger.debug("로깅 설정이 완료되었습니다")

def create_app() -> FastAPI:
    """FastAPI 애플리케이션을 생성하고 설정하는 메인 함수"""
    # 1. FastAPI 인스턴스 생성
    app = FastAPI(
        title="Sticker Background Remover API",
        description="색상 기반 분할과 생성형 AI를 사용한 스티커 이미지 배경 제거 API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # 2. 기본 설정들 적용
    configure_logging()
    configure_cors(app)

    # 3. 라우터 등록
    from app.routes import router
    app.include_router(router)

    logger.info("FastAPI 애플리케이션 생성이 완료되었습니다")
    return app
