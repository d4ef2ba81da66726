import pytest

from app.core.exceptions import InvalidParameterError
from app.schemas.requests import RemovalParameters
from app.services.background_removal.presets import get_preset, list_presets


@pytest.mark.parametrize("name,threshold,smoothing,feather_radius", [
    ("simple", 15, 1, 2),
    ("standard", 30, 2, 3),
    ("complex", 50, 3, 5),
])
def test_preset_values(name, threshold, smoothing, feather_radius):
    preset = get_preset(name)
    assert isinstance(preset, RemovalParameters)
    assert (preset.threshold, preset.smoothing, preset.feather_radius) == (threshold, smoothing, feather_radius)
    assert preset.edge_detection and preset.adaptive_threshold


def test_preset_lookup_ignores_case():
    assert get_preset(" Standard ") == get_preset("standard")


def test_unknown_preset_is_rejected():
    with pytest.raises(InvalidParameterError):
        get_preset("extreme")


def test_list_presets_contains_all_three():
    assert list(list_presets()) == ["simple", "standard", "complex"]


def test_build_converts_validation_errors():
    with pytest.raises(InvalidParameterError):
        RemovalParameters.build(smoothing=-1)
