import numpy as np
import pytest

from mandeljulia.errors import UnknownColormap, UnknownFormula
from mandeljulia.session import JULIA, MANDELBROT, Session, iterations_from_slider
from mandeljulia.viewport import DEFAULT_DOMAIN, Domain


def test_defaults():
    s = Session()
    assert s.resolution == 400
    assert s.domains == {MANDELBROT: DEFAULT_DOMAIN, JULIA: DEFAULT_DOMAIN}
    assert s.formula.name == "standard"
    assert s.c_locked


def test_sessions_do_not_share_state():
    a, b = Session(), Session()
    a.zoom_view(MANDELBROT, 0.5)
    assert b.domains[MANDELBROT] == DEFAULT_DOMAIN


def test_view_roles():
    s = Session(c=(0.1, 0.2), z=(0.3, 0.4))
    assert s.is_julia(JULIA) and not s.is_julia(MANDELBROT)
    assert s.fixed_point(JULIA) == (0.1, 0.2)
    assert s.pointer(MANDELBROT) == (0.1, 0.2)
    assert s.pointer(JULIA) == (0.3, 0.4)
    with pytest.raises(ValueError):
        s.is_julia("newton")


def test_select_c_locks_and_sets():
    s = Session(c_locked=False)
    assert s.select_c((200, 200)) == (0.0, 0.0)
    assert s.c_locked
    assert s.select_c((0, 0)) == (-2.0, 2.0)


def test_track_c_only_when_unlocked():
    s = Session()
    assert not s.track_c((300, 100))
    assert s.c == (0.0, 0.0)
    assert s.toggle_c_lock() is False
    assert s.track_c((300, 100))
    assert s.c == (1.0, 1.0)


def test_select_z_uses_julia_domain():
    s = Session(resolution=100)
    s.domains[JULIA] = Domain(0.0, 1.0, 0.0, 1.0)
    assert s.select_z((50, 25)) == (0.5, 0.75)


def test_zoom_view_centers_on_pointer():
    s = Session()
    s.set_c((1.0, 1.0))
    assert s.zoom_view(MANDELBROT, 0.5) == Domain(0.0, 2.0, 0.0, 2.0)
    s.set_z((-1.0, 0.0))
    assert s.zoom_view(JULIA, 2.0) == Domain(-5.0, 3.0, -4.0, 4.0)
    assert s.pointer_pixel(MANDELBROT) == (200.0, 200.0)


def test_reset():
    s = Session(c=(0.3, 0.1), z=(1.0, 1.0))
    s.zoom_view(MANDELBROT, 0.1)
    s.zoom_view(JULIA, 0.1)
    s.reset()
    assert s.c == s.z == (0.0, 0.0)
    assert s.domains[MANDELBROT] == s.domains[JULIA] == DEFAULT_DOMAIN


def test_reset_single_view():
    s = Session()
    s.zoom_view(MANDELBROT, 0.1)
    s.zoom_view(JULIA, 0.1)
    s.reset_view(JULIA)
    assert s.domains[JULIA] == DEFAULT_DOMAIN
    assert s.domains[MANDELBROT] != DEFAULT_DOMAIN


def test_step_animates_z():
    s = Session(c=(1.0, 0.0))
    assert s.step() == (1.0, 0.0)
    assert s.step(2) == (5.0, 0.0)
    assert s.pointer_pixel(JULIA) == (700.0, 200.0)


def test_selections_validated():
    s = Session()
    s.set_formula("tricorn")
    assert s.formula.name == "tricorn"
    with pytest.raises(UnknownFormula):
        s.set_formula("bogus")
    with pytest.raises(UnknownColormap):
        s.set_colormap("bogus")
    for bad in (0, -1, 2.5, True):
        with pytest.raises(ValueError):
            s.set_max_iterations(bad)
    with pytest.raises(ValueError):
        Session(resolution=0)
    with pytest.raises(UnknownFormula):
        Session(formula="bogus")


def test_lookup_table_rebuilt_on_selection_change():
    s = Session(table_length=101)
    first = s.lookup_table()
    assert first.shape == (101, 3)
    assert s.lookup_table() is first
    s.set_colormap("viridis")
    second = s.lookup_table()
    assert second is not first
    s.set_max_iterations(500)
    assert s.lookup_table() is not second
    assert np.array_equal(s.lookup_table(), second)


@pytest.mark.parametrize(
    "position, expected",
    [(1, 1), (10, 10), (11, 10), (15, 50), (20, 100), (21, 100), (25, 500),
     (30, 1000), (31, 1000), (35, 5000), (45, 15000)],
)
def test_iterations_from_slider(position, expected):
    assert iterations_from_slider(position) == expected


def test_slider_rejects_zero():
    with pytest.raises(ValueError):
        iterations_from_slider(0)
