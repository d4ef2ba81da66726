import io
import os
import sys
from pathlib import Path

# 설정 모듈이 import 시점에 환경을 읽으므로 가장 먼저 지정
os.environ.setdefault("ENV", "test")
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import numpy as np
import pytest
from PIL import Image

from app.utils.data_uri import to_data_uri

WHITE = (255, 255, 255)
BLUE = (0, 0, 255)


def make_square_image(size=100, start=25, end=75, background=WHITE, foreground=BLUE, mode="RGB"):
    """배경 위에 정사각형 피사체가 있는 테스트 이미지"""
    arr = np.zeros((size, size, 3), dtype=np.uint8)
    arr[:, :] = background
    arr[start:end, start:end] = foreground
    return Image.fromarray(arr).convert(mode)


def png_bytes(image):
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def image_data_uri(image):
    return to_data_uri(png_bytes(image), "image/png")


def alpha_of(image):
    return np.array(image.convert("RGBA"))[..., 3]


@pytest.fixture
def square_image():
    return make_square_image()


@pytest.fixture
def square_data_uri(square_image):
    return image_data_uri(square_image)
