from __future__ import annotations

import math
from typing import Any, Dict, Tuple

import numpy as np

from mandeljulia.dynamics import Formula
from mandeljulia.errors import BackendUnavailable
from mandeljulia.renderers.base import GridRenderer, check_request
from mandeljulia.util.logging_setup import get_logger
from mandeljulia.viewport import Domain

Point = Tuple[float, float]

def probe_cuda() -> Dict[str, Any]:
    info: Dict[str, Any] = {"available": False}
    try:
        from numba import config, cuda  # type: ignore
        if not cuda.is_available():
            return info
        if config.ENABLE_CUDASIM:
            # the simulator has no device object to query
            info.update({"available": True, "name": "simulator", "simulator": True})
            return info
        dev = cuda.get_current_device()
        info.update({
            "available": True,
            "name": getattr(dev, "name", None),
            "compute_capability": getattr(dev, "compute_capability", None),
            "max_threads_per_block": getattr(dev, "MAX_THREADS_PER_BLOCK", None),
            "warp_size": getattr(dev, "WARP_SIZE", None),
        })
        return info
    except Exception as e:
        info["error"] = str(e)
        return info

def _load_kernels():
    info = probe_cuda()
    if not info.get("available"):
        raise BackendUnavailable(f"CUDA device not available: {info.get('error', 'no device found')}")
    try:
        from mandeljulia.renderers import cuda_kernels
    except Exception as e:
        raise BackendUnavailable(f"GPU renderer not available: {e}") from e
    return cuda_kernels

class GpuGridRenderer(GridRenderer):
    """numba CUDA backend: one thread per pixel, no data shared between pixels."""

    name = "gpu"

    def _grid(self, kernels, resolution: int):
        tpb = kernels.THREADS_PER_BLOCK
        return (math.ceil(resolution / tpb[0]), math.ceil(resolution / tpb[1])), tpb

    def _launch_counts(self, kernels, *, domain, formula, fixed, is_julia, max_iterations, resolution):
        blocks, tpb = self._grid(kernels, resolution)
        d_counts = kernels.cuda.device_array((resolution, resolution), dtype=np.int32)
        kernels.escape_kernel[blocks, tpb](
            float(domain.re_min), float(domain.width),
            float(domain.im_min), float(domain.height),
            int(resolution),
            int(formula.id),
            float(formula.escape_radius_sq),
            float(fixed[0]), float(fixed[1]),
            1 if is_julia else 0,
            int(max_iterations),
            d_counts,
        )
        return d_counts

    def escape_counts(
        self,
        *,
        domain: Domain,
        formula: Formula,
        fixed: Point,
        is_julia: bool,
        max_iterations: int,
        resolution: int,
    ) -> np.ndarray:
        check_request(resolution)
        kernels = _load_kernels()
        try:
            d_counts = self._launch_counts(
                kernels, domain=domain, formula=formula, fixed=fixed, is_julia=is_julia,
                max_iterations=max_iterations, resolution=resolution,
            )
            return d_counts.copy_to_host()
        except Exception as e:
            raise BackendUnavailable(f"GPU kernel failed: {e}") from e

    def render(
        self,
        *,
        domain: Domain,
        formula: Formula,
        fixed: Point,
        is_julia: bool,
        max_iterations: int,
        resolution: int,
        table: np.ndarray,
    ) -> np.ndarray:
        check_request(resolution, table)
        kernels = _load_kernels()
        logger = get_logger()
        try:
            d_counts = self._launch_counts(
                kernels, domain=domain, formula=formula, fixed=fixed, is_julia=is_julia,
                max_iterations=max_iterations, resolution=resolution,
            )
            d_table = kernels.cuda.to_device(np.ascontiguousarray(table, dtype=np.float32))
            d_rgba = kernels.cuda.device_array((resolution, resolution, 4), dtype=np.uint8)
            blocks, tpb = self._grid(kernels, resolution)
            kernels.colorize_kernel[blocks, tpb](d_counts, d_table, int(max_iterations), int(resolution), d_rgba)
            rgba = d_rgba.copy_to_host()
        except Exception as e:
            raise BackendUnavailable(f"GPU kernel failed: {e}") from e
        logger.debug("[gpu] Rendered %sx%s grid", resolution, resolution)
        return rgba
