import numpy as np
import pytest
from PIL import Image

from app.services.image_processing.color_analyzer import ColorAnalyzer
from app.services.image_processing.image_analyzer import ImageAnalyzer
from app.services.image_processing.image_processor import ImageProcessor
from tests.conftest import image_data_uri, make_square_image


def rgba_array(image):
    return np.array(image.convert("RGBA"))


def test_color_distance_is_zero_for_identical_colors():
    pixels = np.array([[[12, 200, 77]]], dtype=np.uint8)
    assert ColorAnalyzer.color_distance(pixels, (12, 200, 77))[0, 0] == 0


def test_color_distance_between_white_and_black():
    pixels = np.array([[[255, 255, 255]]], dtype=np.uint8)
    assert ColorAnalyzer.color_distance(pixels, (0, 0, 0))[0, 0] == pytest.approx(764.83, abs=0.01)


def test_color_distance_weights_green_more_than_blue():
    green = np.array([[[0, 50, 0]]], dtype=np.uint8)
    blue = np.array([[[0, 0, 50]]], dtype=np.uint8)
    assert ColorAnalyzer.color_distance(green, (0, 0, 0)) > ColorAnalyzer.color_distance(blue, (0, 0, 0))


def test_estimate_background_color_uses_dominant_border_color():
    arr = rgba_array(make_square_image(size=50, start=10, end=40))
    # 테두리 일부를 다른 색으로
    arr[0, :5, :3] = (255, 0, 0)
    assert ColorAnalyzer.estimate_background_color(arr) == (255, 255, 255)


def test_estimate_background_color_averages_quantized_members():
    arr = rgba_array(make_square_image(size=20, start=5, end=15))
    arr[0, :, :3] = (250, 250, 250)
    color = ColorAnalyzer.estimate_background_color(arr)
    assert all(250 <= c <= 255 for c in color)


def test_estimate_background_color_falls_back_to_corners_when_border_transparent():
    arr = np.zeros((10, 10, 4), dtype=np.uint8)
    arr[..., :3] = (10, 20, 30)
    assert ColorAnalyzer.estimate_background_color(arr) == (10, 20, 30)


def test_mean_color_of_sample_points():
    arr = rgba_array(make_square_image(size=10, start=5, end=10, foreground=(0, 0, 0)))
    assert ColorAnalyzer.mean_color(arr, [(0, 0), (9, 9)]) == (128, 128, 128)


@pytest.mark.parametrize("image,complexity,threshold", [
    (Image.new("RGB", (40, 40), (255, 255, 255)), "simple", 20),
    (Image.fromarray(np.random.default_rng(0).integers(0, 256, (40, 40, 3), dtype=np.uint8)), "complex", 45),
    (Image.fromarray(np.repeat(np.array([100, 200], dtype=np.uint8), 20)[None, :, None].repeat(40, 0).repeat(3, 2)),
     "medium", 30),
])
def test_analyze_image_complexity(image, complexity, threshold):
    result = ImageAnalyzer.analyze_image(rgba_array(image))
    assert result["complexity"] == complexity
    assert result["suggested_threshold"] == threshold


def test_analyze_image_background_is_corner_average():
    arr = rgba_array(Image.new("RGB", (30, 30), (255, 255, 255)))
    arr[0, 0, :3] = (0, 0, 0)
    result = ImageAnalyzer.analyze_image(arr)
    assert result["background_color"] == (191, 191, 191)


def test_image_processor_returns_rgb_dict():
    analysis = ImageProcessor.analyze_image(image_data_uri(make_square_image()))
    assert analysis["background_color"] == {"r": 255, "g": 255, "b": 255}
    assert analysis["complexity"] in ("simple", "medium", "complex")


def test_detect_edges_finds_square_outline():
    edges = ImageAnalyzer.detect_edges(rgba_array(make_square_image()))
    assert edges.dtype == bool
    assert edges[50, 20:30].any()
    assert not edges[:10, :10].any()
    assert not edges[45:55, 45:55].any()


def test_local_stddev_separates_flat_and_noisy_regions():
    arr = np.zeros((40, 40, 4), dtype=np.uint8)
    arr[:, 20:, :3] = np.random.default_rng(1).integers(0, 256, (40, 20, 3), dtype=np.uint8)
    local = ImageAnalyzer.local_stddev(arr, 15)
    assert np.all(local[:, :10] < 1.0)
    assert np.all(local[:, 30:] > 10.0)
