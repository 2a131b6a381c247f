import math

import pytest

from mandeljulia.viewport import DEFAULT_DOMAIN, Domain, pixel_in_bounds, pixel_to_plane, plane_to_pixel, zoom


def test_corners_and_center(default_domain):
    assert pixel_to_plane((0, 0), default_domain, 400) == (-2.0, 2.0)
    assert pixel_to_plane((200, 200), default_domain, 400) == (0.0, 0.0)
    assert pixel_to_plane((400, 400), default_domain, 400) == (2.0, -2.0)


def test_rows_run_from_top_down(default_domain):
    _, top = pixel_to_plane((10, 0), default_domain, 400)
    _, below = pixel_to_plane((10, 1), default_domain, 400)
    assert top > below


def test_plane_to_pixel(default_domain):
    assert plane_to_pixel((0.0, 0.0), default_domain, 400) == (200.0, 200.0)
    assert plane_to_pixel((-2.0, 2.0), default_domain, 400) == (0.0, 0.0)


@pytest.mark.parametrize("domain", [DEFAULT_DOMAIN, Domain(-0.75, -0.7, 0.1, 0.13), Domain(-1e-3, 3.0, -7.0, 1e-2)])
@pytest.mark.parametrize("resolution", [1, 37, 400])
def test_round_trip(domain, resolution):
    step = max(1, resolution // 9)
    for px in range(0, resolution, step):
        for py in range(0, resolution, step):
            back = plane_to_pixel(pixel_to_plane((px, py), domain, resolution), domain, resolution)
            assert back == pytest.approx((px, py), abs=1e-6)


def test_zoom_factor_one_recenters(default_domain):
    out = zoom(default_domain, 1.0, (0.5, -0.25))
    assert out == Domain(-1.5, 2.5, -2.25, 1.75)
    assert out.width == default_domain.width
    assert out.height == default_domain.height
    assert out.center == (0.5, -0.25)


def test_zoom_in_and_out(default_domain):
    assert zoom(default_domain, 0.5, (0.0, 0.0)) == Domain(-1.0, 1.0, -1.0, 1.0)
    assert zoom(default_domain, 2.0, (0.0, 0.0)) == Domain(-4.0, 4.0, -4.0, 4.0)


def test_repeated_zoom_is_not_clamped():
    d = DEFAULT_DOMAIN
    for _ in range(40):
        d = zoom(d, 0.5, (-0.75, 0.1))
    assert d.width == pytest.approx(4.0 * 0.5 ** 40)


@pytest.mark.parametrize("factor", [0.0, -1.0])
def test_zoom_rejects_non_positive_factor(default_domain, factor):
    with pytest.raises(ValueError):
        zoom(default_domain, factor, (0.0, 0.0))


@pytest.mark.parametrize(
    "bounds",
    [(1.0, 1.0, 0.0, 1.0), (2.0, 1.0, 0.0, 1.0), (0.0, 1.0, 1.0, -1.0), (math.nan, 1.0, 0.0, 1.0), (0.0, math.inf, 0.0, 1.0)],
)
def test_invalid_domain(bounds):
    with pytest.raises(ValueError):
        Domain(*bounds)


def test_intervals_round_trip():
    d = Domain.from_intervals([[-2, 1], [-1.5, 1.5]])
    assert d == Domain(-2.0, 1.0, -1.5, 1.5)
    assert d.as_intervals() == [[-2.0, 1.0], [-1.5, 1.5]]
    with pytest.raises(ValueError):
        Domain.from_intervals([[-2, 1]])


def test_resolution_must_be_positive(default_domain):
    with pytest.raises(ValueError):
        pixel_to_plane((0, 0), default_domain, 0)
    with pytest.raises(ValueError):
        plane_to_pixel((0.0, 0.0), default_domain, -4)


def test_pixel_in_bounds():
    assert pixel_in_bounds((0, 0), 10)
    assert pixel_in_bounds((9.5, 3.2), 10)
    assert not pixel_in_bounds((10, 3), 10)
    assert not pixel_in_bounds((-0.1, 3), 10)
