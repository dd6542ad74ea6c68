import pytest

from pyceltic.__main__ import build_parser
from pyceltic.config import EngineConfig
from pyceltic.viewport import Viewport


def test_defaults():
    config = EngineConfig()
    assert (config.width, config.height) == (800, 600)
    assert config.max_iter == 100
    assert config.max_orbit_steps == 1000
    assert config.escape_radius == 2.0
    assert config.tolerance == 1e-4
    assert config.formula == 1
    assert config.zoom_factor == 1.2


def test_viewport_from_config():
    viewport = EngineConfig(width=320, height=200, zoom=80.0).viewport(offset_x=5.0)
    assert viewport == Viewport(zoom=80.0, offset_x=5.0, offset_y=0.0, width=320, height=200)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0},
        {"height": -1},
        {"max_iter": 0},
        {"max_orbit_steps": 0},
        {"escape_radius": 0.0},
        {"tolerance": -1e-4},
        {"zoom": 0.0},
        {"zoom_factor": float("nan")},
        {"formula": 7},
    ],
)
def test_rejects_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_wheel_zoom_without_notches_is_identity():
    viewport = Viewport(zoom=10.0, width=40, height=30)
    assert EngineConfig().wheel_zoom(viewport, 3, 7, 0) is viewport


@pytest.mark.parametrize("notches, scale", [(2, 1.2 ** 2), (-1, 1 / 1.2)])
def test_wheel_zoom_keeps_anchor_fixed(notches, scale):
    viewport = Viewport(zoom=10.0, offset_x=4.0, offset_y=-2.0, width=40, height=30)
    zoomed = EngineConfig().wheel_zoom(viewport, 31, 5, notches)
    assert zoomed.zoom == pytest.approx(10.0 * scale)
    before = viewport.to_complex(31, 5)
    after = zoomed.to_complex(31, 5)
    assert after.real == pytest.approx(before.real)
    assert after.imag == pytest.approx(before.imag)


def test_wheel_zoom_uses_configured_factor():
    viewport = Viewport(zoom=10.0, width=40, height=30)
    zoomed = EngineConfig(zoom_factor=2.0).wheel_zoom(viewport, 20, 15, 3)
    assert zoomed.zoom == pytest.approx(80.0)


def test_cli_defaults_come_from_config():
    args = build_parser().parse_args(["field"])
    assert args.escape_radius == 2.0
    assert args.imax == 100
    assert args.dims == [800, 600]
    assert args.zoom == 250.0
    assert args.zoom_factor == 1.2
    assert args.formula == 1

    custom = EngineConfig(max_iter=7, escape_radius=3.0, max_orbit_steps=50, tolerance=1e-6)
    args = build_parser(custom).parse_args(["orbit", "0", "0"])
    assert args.escape_radius == 3.0
    assert args.max_steps == 50
    assert args.tolerance == 1e-6
    assert build_parser(custom).parse_args(["field"]).imax == 7
