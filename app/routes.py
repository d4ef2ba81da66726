""" 메인 라우터 - API 엔드포인트만 담당 """
import io
import asyncio
from fastapi import APIRouter, UploadFile, File, Form, HTTPException
from fastapi.responses import StreamingResponse

from app.core.exceptions import (
    AIServiceError,
    AIServiceUnavailableError,
    ImageDecodeError,
    ImageProcessingError,
    InvalidImageError,
    InvalidParameterError,
)
from app.schemas.requests import (
    AddBorderRequest,
    AIRemoveBackgroundRequest,
    AnalyzeImageRequest,
    BatchRemoveBackgroundRequest,
    GenerateStickerRequest,
    RemovalParameters,
    RemoveBackgroundRequest,
)
from app.schemas.responses import (
    AIImageResponse,
    BatchRemoveBackgroundResponse,
    ImageAnalysisResponse,
    PresetsResponse,
    RemoveBackgroundResponse,
)
from app.services.ai.ai_image_service import AIImageService
from app.services.background_removal.background_remover import BackgroundRemover, RemovalResult
from app.services.background_removal.batch_remover import BatchRemover
from app.services.background_removal.presets import list_presets
from app.services.image_processing.image_loader import ImageLoader
from app.services.image_processing.image_processor import ImageProcessor
from app.utils.logger import setup_logger
from config.settings import API_CONFIG, BACKGROUND_REMOVAL

logger = setup_logger(__name__)
router = APIRouter()

MAX_CONCURRENT = API_CONFIG['MAX_CONCURRENT_REQUESTS']
semaphore = asyncio.Semaphore(MAX_CONCURRENT)

# === 오류 변환 함수 ===
def to_http_exception(e: ImageProcessingError) -> HTTPException:
    """서비스 예외를 HTTP 오류로 변환"""
    if isinstance(e, (ImageDecodeError, InvalidImageError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, InvalidParameterError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, AIServiceUnavailableError):
        return HTTPException(status_code=503, detail="생성형 AI 서비스를 사용할 수 없습니다")
    if isinstance(e, AIServiceError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail="서버 내부 오류가 발생했습니다")

async def run_in_thread(fn, *args, **kwargs):
    """동시 요청 수를 제한하며 CPU 작업을 별도 스레드에서 실행"""
    async with semaphore:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except ImageProcessingError as e:
            raise to_http_exception(e)
        except Exception as e:
            logger.error(f"요청 처리 중 예상치 못한 오류: {str(e)}")
            raise HTTPException(status_code=500, detail="서버 내부 오류가 발생했습니다")

# === 응답 생성 함수 ===
def create_removal_response(result: RemovalResult) -> RemoveBackgroundResponse:
    """배경 제거 결과를 JSON 응답으로 변환"""
    return RemoveBackgroundResponse(**result.to_dict())

def create_image_response(result: RemovalResult) -> StreamingResponse:
    """PIL 이미지를 PNG 응답으로 변환"""
    buffer = io.BytesIO(ImageLoader.encode_png(result.image))

    return StreamingResponse(
        content=buffer,
        media_type="image/png",
        headers={
            "Content-Disposition": "attachment; filename=result.png",
            "X-Processing-Time-Ms": str(result.metadata.get('processing_time_ms', '')),
        }
    )

# === API 엔드포인트들 ===
@router.get("/health")
async def health_check():
    """서비스 상태 확인"""
    return {"status": "healthy", "service": "sticker-background-remover"}

@router.get("/background-removal/presets", response_model=PresetsResponse)
async def get_presets():
    """Simple / Standard / Complex 프리셋 파라미터"""
    return PresetsResponse(presets=list_presets())

@router.post("/background-removal/remove", response_model=RemoveBackgroundResponse)
async def remove_background(request: RemoveBackgroundRequest):
    """
    데이터 URI 이미지의 배경 제거
    - image_data_uri: 'data:<mimetype>;base64,<encoded_data>'
    - threshold, smoothing, feather_radius, mode, edge_detection, adaptive_threshold, manual_hints
    - return_mask: 마스크 이미지 포함 여부
    """
    result = await run_in_thread(
        BackgroundRemover.remove_background,
        request.image_data_uri, request.to_parameters(), 'request', request.return_mask
    )
    return create_removal_response(result)

@router.post("/background-removal/remove-upload")
async def remove_background_upload(
    image: UploadFile = File(...),
    threshold: float = Form(BACKGROUND_REMOVAL['THRESHOLD']),
    smoothing: int = Form(BACKGROUND_REMOVAL['SMOOTHING']),
    feather_radius: int = Form(BACKGROUND_REMOVAL['FEATHER_RADIUS']),
    mode: str = Form(BACKGROUND_REMOVAL['MODE']),
    edge_detection: bool = Form(BACKGROUND_REMOVAL['EDGE_DETECTION']),
    adaptive_threshold: bool = Form(BACKGROUND_REMOVAL['ADAPTIVE_THRESHOLD']),
) -> StreamingResponse:
    """
    업로드한 이미지 파일의 배경 제거 후 PNG 반환
    - image: 업로드할 이미지 파일
    - 나머지 폼 필드: 처리 파라미터
    """
    try:
        params = RemovalParameters.build(
            threshold=threshold,
            smoothing=smoothing,
            feather_radius=feather_radius,
            mode=mode,
            edge_detection=edge_detection,
            adaptive_threshold=adaptive_threshold,
        )
    except InvalidParameterError as e:
        raise to_http_exception(e)

    contents = await image.read()
    result = await run_in_thread(
        BackgroundRemover.remove_background,
        contents, params, image.filename or 'upload', False
    )
    return create_image_response(result)

@router.post("/background-removal/analyze", response_model=ImageAnalysisResponse)
async def analyze_image(request: AnalyzeImageRequest):
    """이미지를 분석하여 추천 임계값, 배경색, 복잡도 반환"""
    analysis = await run_in_thread(ImageProcessor.analyze_image, request.image_data_uri)
    return ImageAnalysisResponse(**analysis)

@router.post("/background-removal/batch", response_model=BatchRemoveBackgroundResponse)
async def remove_background_batch(request: BatchRemoveBackgroundRequest):
    """여러 이미지의 배경을 한 번에 제거 (결과는 입력 순서)"""
    items = [(item.image_data_uri, item.to_parameters()) for item in request.items]
    return_mask = any(item.return_mask for item in request.items)

    results = await run_in_thread(
        BatchRemover.remove_all,
        items, request.parallel, request.max_concurrency, return_mask
    )

    responses = []
    for item, result in zip(request.items, results):
        if not item.return_mask:
            result.mask = None
        responses.append(create_removal_response(result))
    return BatchRemoveBackgroundResponse(results=responses)

@router.post("/ai/remove-background", response_model=AIImageResponse)
async def ai_remove_background(request: AIRemoveBackgroundRequest):
    """생성형 모델을 사용한 배경 제거"""
    image_data_uri = await run_in_thread(AIImageService.remove_background, request.image_data_uri)
    return AIImageResponse(image_data_uri=image_data_uri)

@router.post("/ai/add-border", response_model=AIImageResponse)
async def ai_add_border(request: AddBorderRequest):
    """다이컷 스티커 테두리 추가"""
    image_data_uri = await run_in_thread(
        AIImageService.add_border,
        request.image_data_uri, request.border_color, request.border_width
    )
    return AIImageResponse(image_data_uri=image_data_uri)

@router.post("/ai/generate-sticker", response_model=AIImageResponse)
async def ai_generate_sticker(request: GenerateStickerRequest):
    """텍스트 프롬프트로 스티커 이미지 생성"""
    image_data_uri = await run_in_thread(AIImageService.generate_sticker, request.prompt)
    return AIImageResponse(image_data_uri=image_data_uri)
