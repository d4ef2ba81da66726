from app.utils.logger import setup_logger
from config.environments import current_env, ENV

# 로거 설정
logger = setup_logger(__name__)

# 서버 정보 출력
logger.info("서버를 시작합니다...")
logger.info(f"서버 주소: http://{current_env['HOST']}:{current_env['PORT']}")
logger.info(f"환경: {ENV}")

# FastAPI 앱 생성
from app import create_app
app = create_app()

# 서버 실행
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=current_env['HOST'],
        port=current_env['PORT'],
        log_level="info",
        reload=current_env.get('DEBUG', False)
    )
