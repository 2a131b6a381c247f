"""CUDA kernels for the accelerated backend.

One thread per pixel. The formula is chosen by its integer tag inside the
shared scalar functions from ``mandeljulia.dynamics``, compiled here as device
functions, so both backends evaluate the same arithmetic.
"""

import math

from numba import cuda

from mandeljulia.dynamics import divergence_xy, iterate_xy

THREADS_PER_BLOCK = (16, 16)

_iterate = cuda.jit(device=True)(iterate_xy)
_divergence = cuda.jit(device=True)(divergence_xy)

@cuda.jit(device=True)
def _escape_time(x, y, cx, cy, fid, limit, max_iterations):
    n = 1
    while n < max_iterations:
        if abs(_divergence(fid, x, y)) >= limit:
            return n
        x, y = _iterate(fid, x, y, cx, cy)
        n += 1
    return 0

@cuda.jit
def escape_kernel(
    re_min, re_span,      # float64
    im_min, im_span,      # float64
    resolution,           # int32
    fid,                  # int32 formula tag
    limit,                # float64, escape_radius ** 2
    fixed_x, fixed_y,     # float64, c of the Julia view
    is_julia,             # int32 0/1
    max_iterations,       # int32
    out_counts,           # int32[:, :]
):
    tx = cuda.threadIdx.x
    ty = cuda.threadIdx.y
    px = cuda.blockIdx.x * cuda.blockDim.x + tx
    py = cuda.blockIdx.y * cuda.blockDim.y + ty

    if px >= resolution or py >= resolution:
        return

    re = px / resolution * re_span + re_min
    im = (1 - py / resolution) * im_span + im_min

    if is_julia:
        n = _escape_time(re, im, fixed_x, fixed_y, fid, limit, max_iterations)
    else:
        n = _escape_time(0.0, 0.0, re, im, fid, limit, max_iterations)
    out_counts[py, px] = n

@cuda.jit
def colorize_kernel(counts, table, max_iterations, resolution, out_rgba):
    """Sample the colormap table (float32[n, 3]) with linear interpolation."""
    tx = cuda.threadIdx.x
    ty = cuda.threadIdx.y
    px = cuda.blockIdx.x * cuda.blockDim.x + tx
    py = cuda.blockIdx.y * cuda.blockDim.y + ty

    if px >= resolution or py >= resolution:
        return

    n = counts[py, px]
    out_rgba[py, px, 3] = 255
    if n == 0:
        out_rgba[py, px, 0] = 0
        out_rgba[py, px, 1] = 0
        out_rgba[py, px, 2] = 0
        return

    last = table.shape[0] - 1
    pos = n / max_iterations * last
    if pos > last:
        pos = last
    if pos < 0.0:
        pos = 0.0
    i0 = int(math.floor(pos))
    i1 = i0 + 1
    if i1 > last:
        i1 = last
    f = pos - i0
    for ch in range(3):
        v = table[i0, ch] * (1.0 - f) + table[i1, ch] * f
        out_rgba[py, px, ch] = int(v + 0.5)
