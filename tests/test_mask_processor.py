import numpy as np
import pytest
from PIL import Image

from app.services.image_processing.mask_processor import MaskProcessor


def square_mask(size=40, start=10, end=30):
    mask = np.zeros((size, size), dtype=bool)
    mask[start:end, start:end] = True
    return mask


def test_smooth_mask_removes_speckles_and_fills_pinholes():
    mask = square_mask()
    mask[2, 2] = True      # 배경의 잡티
    mask[20, 20] = False   # 전경의 구멍
    smoothed = MaskProcessor.smooth_mask(mask, passes=1)
    assert not smoothed[2, 2]
    assert smoothed[20, 20]


def test_smooth_mask_preserves_square_corners():
    mask = square_mask()
    assert np.array_equal(MaskProcessor.smooth_mask(mask, passes=3), mask)


def test_smooth_mask_with_zero_passes_is_identity():
    mask = square_mask()
    mask[2, 2] = True
    assert np.array_equal(MaskProcessor.smooth_mask(mask, passes=0), mask)


def test_feather_mask_builds_linear_ramp_inside_foreground():
    soft = MaskProcessor.feather_mask(square_mask(), radius=3)
    assert soft.dtype == np.float32
    assert soft[20, 9] == 0.0
    assert soft[20, 10:13].tolist() == pytest.approx([1 / 3, 2 / 3, 1.0], abs=1e-3)
    assert soft[20, 20] == 1.0


def test_feather_mask_with_zero_radius_is_binary():
    soft = MaskProcessor.feather_mask(square_mask(), radius=0)
    assert set(np.unique(soft).tolist()) == {0.0, 1.0}


@pytest.mark.parametrize("value", [True, False])
def test_feather_mask_handles_uniform_masks(value):
    mask = np.full((8, 8), value)
    assert np.all(MaskProcessor.feather_mask(mask, radius=4) == float(value))


def test_apply_mask_caps_alpha_by_source_and_keeps_rgb():
    arr = np.zeros((4, 4, 4), dtype=np.uint8)
    arr[..., :3] = (10, 20, 30)
    arr[..., 3] = 200
    mask = np.full((4, 4), 0.5, dtype=np.float32)
    mask[0, 0] = 0.0
    arr[2, 2, 3] = 50

    result = np.array(MaskProcessor.apply_mask_to_image(Image.fromarray(arr), mask))
    assert result[0, 0, 3] == 0
    assert result[1, 1, 3] == 128
    assert result[2, 2, 3] == 50
    assert np.all(result[..., :3] == (10, 20, 30))


def test_apply_mask_rejects_mismatched_shape():
    with pytest.raises(ValueError):
        MaskProcessor.apply_mask_to_image(Image.new("RGBA", (4, 4)), np.ones((3, 3)))


def test_mask_to_image_is_grayscale():
    image = MaskProcessor.mask_to_image(np.array([[0.0, 0.5, 1.0]], dtype=np.float32))
    assert image.mode == "L"
    assert list(image.getdata()) == [0, 128, 255]
