""" 여러 이미지의 배경을 일괄 제거하는 서비스 """
from concurrent.futures import FIRST_COMPLETED, wait
from typing import List, Sequence, Tuple

from app.core.exceptions import InvalidParameterError
from app.core.parallel_executor import get_executor_manager
from app.schemas.requests import RemovalParameters
from app.services.background_removal.background_remover import BackgroundRemover, RemovalResult
from app.services.image_processing.image_loader import ImageSource
from app.utils.logger import setup_logger
from config.settings import BATCH

logger = setup_logger(__name__)

BatchItem = Tuple[ImageSource, RemovalParameters]


class BatchRemover:
    """일괄 배경 제거 서비스"""

    @staticmethod
    def remove_all(
        items: Sequence[BatchItem],
        parallel: bool = BATCH['PARALLEL'],
        max_concurrency: int = BATCH['MAX_CONCURRENCY'],
        return_mask: bool = True
    ) -> List[RemovalResult]:
        """
        여러 이미지의 배경 제거 (결과 순서 = 입력 순서)

        Args:
            items: (이미지, 파라미터) 목록
            parallel: 병렬 처리 여부
            max_concurrency: 동시에 처리할 최대 개수
            return_mask: 마스크 이미지 반환 여부

        Returns:
            list: 입력 순서대로 정렬된 결과

        Raises:
            ImageProcessingError: 첫 번째로 실패한 항목의 예외
        """
        if max_concurrency < 1:
            raise InvalidParameterError(f"max_concurrency는 1 이상이어야 합니다: {max_concurrency}")

        logger.info(f"일괄 배경 제거 시작: {len(items)}개 (병렬={parallel}, 동시={max_concurrency})")

        if not parallel or len(items) <= 1:
            return [
                BatchRemover._process_item(i, item, return_mask)
                for i, item in enumerate(items)
            ]

        return BatchRemover._process_parallel(items, max_concurrency, return_mask)

    @staticmethod
    def _process_item(index: int, item: BatchItem, return_mask: bool) -> RemovalResult:
        """단일 항목 처리"""
        image, params = item
        return BackgroundRemover.remove_background(image, params, f"batch-{index + 1}", return_mask)

    @staticmethod
    def _process_parallel(
        items: Sequence[BatchItem],
        max_concurrency: int,
        return_mask: bool
    ) -> List[RemovalResult]:
        """동시 실행 개수를 제한하며 스레드 풀에서 처리"""
        executor_manager = get_executor_manager()
        results: List[RemovalResult] = [None] * len(items)
        queue = iter(enumerate(items))
        pending = {}

        def submit_next() -> bool:
            entry = next(queue, None)
            if entry is None:
                return False
            index, item = entry
            future = executor_manager.submit(BatchRemover._process_item, index, item, return_mask)
            pending[future] = index
            return True

        for _ in range(min(max_concurrency, len(items))):
            submit_next()

        try:
            while pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    index = pending.pop(future)
                    results[index] = future.result()
                    submit_next()
        except Exception:
            for future in pending:
                future.cancel()
            raise

        logger.info(f"일괄 배경 제거 완료: {len(results)}개")
        return results
