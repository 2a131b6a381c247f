import numpy as np
import pytest

pytest.importorskip("numba")

from numba import config, cuda

from mandeljulia.colormaps import build_lookup_table
from mandeljulia.dynamics import FORMULAS, get_formula
from mandeljulia.errors import BackendUnavailable
from mandeljulia.renderers import gpu
from mandeljulia.renderers.cpu import CpuGridRenderer
from mandeljulia.renderers.gpu import GpuGridRenderer, probe_cuda
from mandeljulia.viewport import DEFAULT_DOMAIN, Domain

needs_cuda = pytest.mark.skipif(not cuda.is_available(), reason="no CUDA device or simulator")

RESOLUTION = 16
CAP = 30
FIXED = (-0.4, 0.6)


def _request(formula, is_julia, domain=DEFAULT_DOMAIN):
    return dict(domain=domain, formula=formula, fixed=FIXED, is_julia=is_julia,
                max_iterations=CAP, resolution=RESOLUTION)


@needs_cuda
@pytest.mark.parametrize("formula", list(FORMULAS.values()), ids=lambda f: f.name)
@pytest.mark.parametrize("is_julia", [False, True])
def test_counts_match_cpu(formula, is_julia):
    cpu = CpuGridRenderer().escape_counts(**_request(formula, is_julia))
    dev = GpuGridRenderer().escape_counts(**_request(formula, is_julia))
    assert dev.shape == cpu.shape
    assert dev.dtype == np.int32
    # device FMA contraction may move a pixel sitting exactly on an escape boundary
    assert np.mean(dev != cpu) <= 0.02


@needs_cuda
def test_partial_blocks():
    domain = Domain(-0.75, -0.7, 0.1, 0.13)
    kwargs = dict(domain=domain, formula=get_formula("standard"), fixed=FIXED, is_julia=False,
                  max_iterations=CAP, resolution=20)
    assert np.mean(GpuGridRenderer().escape_counts(**kwargs) != CpuGridRenderer().escape_counts(**kwargs)) <= 0.02


@needs_cuda
def test_render_matches_cpu_colors():
    table = build_lookup_table("aqua", 1000)
    formula = get_formula("standard")
    cpu_counts = CpuGridRenderer().escape_counts(**_request(formula, True))
    cpu = CpuGridRenderer().render(table=table, **_request(formula, True))
    dev = GpuGridRenderer().render(table=table, **_request(formula, True))
    assert dev.shape == (RESOLUTION, RESOLUTION, 4)
    assert dev.dtype == np.uint8
    assert (dev[..., 3] == 255).all()
    assert (dev[cpu_counts == 0][:, :3] == 0).all()
    # the device samples the table with linear interpolation, the cpu takes the nearest entry
    same = GpuGridRenderer().escape_counts(**_request(formula, True)) == cpu_counts
    diff = np.abs(dev[..., :3].astype(int) - cpu[..., :3].astype(int))
    assert diff[same].max() <= 3


def test_unavailable_device_raises(monkeypatch):
    monkeypatch.setattr(gpu, "probe_cuda", lambda: {"available": False, "error": "no driver"})
    with pytest.raises(BackendUnavailable, match="no driver"):
        GpuGridRenderer().escape_counts(**_request(get_formula("standard"), False))


def test_probe_reports_availability():
    info = probe_cuda()
    assert isinstance(info["available"], bool)


@pytest.mark.skipif(not config.ENABLE_CUDASIM, reason="only meaningful under the CUDA simulator")
def test_probe_recognises_simulator():
    info = probe_cuda()
    assert info["available"] is True
    assert info["simulator"] is True
    assert "error" not in info


@needs_cuda
def test_probe_agrees_with_numba():
    assert probe_cuda()["available"] is True
