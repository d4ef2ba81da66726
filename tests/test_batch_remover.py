import pytest

from app.core.exceptions import ImageDecodeError, InvalidParameterError
from app.core.parallel_executor import get_executor_manager
from app.schemas.requests import RemovalParameters
from app.services.background_removal.batch_remover import BatchRemover
from tests.conftest import make_square_image

SIZES = [10, 20, 30, 40, 50]


def make_items(sizes=SIZES):
    return [
        (make_square_image(size=size, start=size // 4, end=3 * size // 4), RemovalParameters())
        for size in sizes
    ]


@pytest.fixture(autouse=True)
def shutdown_executor():
    yield
    get_executor_manager().shutdown()


@pytest.mark.parametrize("parallel,max_concurrency", [(True, 2), (True, 8), (False, 4)])
def test_results_follow_input_order(parallel, max_concurrency):
    results = BatchRemover.remove_all(make_items(), parallel=parallel, max_concurrency=max_concurrency)
    assert [r.image.size for r in results] == [(s, s) for s in SIZES]


def test_each_item_uses_its_own_parameters():
    source = make_square_image(size=40, start=10, end=30)
    items = [
        (source, RemovalParameters(feather_radius=0)),
        (source, RemovalParameters(feather_radius=5)),
    ]
    hard, soft = BatchRemover.remove_all(items, max_concurrency=2)
    assert hard.image.getpixel((11, 20))[3] == 255
    assert soft.image.getpixel((11, 20))[3] < 255


def test_return_mask_false_omits_masks():
    results = BatchRemover.remove_all(make_items([16, 24]), return_mask=False)
    assert all(r.mask is None for r in results)


def test_failing_item_fails_the_batch():
    items = make_items([10, 20, 30])
    items[1] = (b"not an image", RemovalParameters())
    with pytest.raises(ImageDecodeError):
        BatchRemover.remove_all(items, max_concurrency=2)


def test_invalid_concurrency_is_rejected():
    with pytest.raises(InvalidParameterError):
        BatchRemover.remove_all(make_items(), max_concurrency=0)


def test_empty_batch_returns_empty_list():
    assert BatchRemover.remove_all([]) == []
