from __future__ import annotations

import os
from typing import Any, Dict, Iterable, Tuple

import numpy as np

from mandeljulia.errors import BackendUnavailable
from mandeljulia.renderers.base import GridRenderer, to_image
from mandeljulia.renderers.cpu import CpuGridRenderer
from mandeljulia.renderers.gpu import GpuGridRenderer, probe_cuda
from mandeljulia.session import VIEWS, Session
from mandeljulia.util.logging_setup import get_logger

_RENDERERS = {
    "cpu": CpuGridRenderer,
    "gpu": GpuGridRenderer,
}

def choose_renderer(*, renderer: str) -> str:
    if renderer in _RENDERERS:
        return renderer
    if renderer != "auto":
        raise ValueError("renderer must be one of: auto, cpu, gpu")
    if probe_cuda().get("available"):
        return "gpu"
    return "cpu"

def get_renderer(name: str) -> GridRenderer:
    try:
        return _RENDERERS[name]()
    except KeyError:
        raise ValueError(f"Unknown renderer: {name!r}") from None

def renderer_info(resolved: str) -> Dict[str, Any]:
    info = {"resolved": resolved}
    info.update({"cuda": probe_cuda()})
    return info

def render_view(session: Session, view: str, *, renderer: str = "auto") -> Tuple[np.ndarray, str]:
    """Render one view; returns the grid and the backend that actually produced it."""
    logger = get_logger()
    resolved = choose_renderer(renderer=renderer)
    table = session.lookup_table()
    kwargs = dict(
        domain=session.domains[view],
        formula=session.formula,
        fixed=session.fixed_point(view),
        is_julia=session.is_julia(view),
        max_iterations=session.max_iterations,
        resolution=session.resolution,
        table=table,
    )

    logger.info("Render start view=%s renderer=%s formula=%s iter=%s domain=%s",
                view, resolved, session.formula.name, session.max_iterations, session.domains[view].as_intervals())
    try:
        grid = get_renderer(resolved).render(**kwargs)
    except BackendUnavailable as e:
        if resolved == "cpu":
            raise
        logger.warning("Accelerated backend unavailable (%s); falling back to cpu", e)
        resolved = "cpu"
        grid = get_renderer(resolved).render(**kwargs)
    logger.info("Render done view=%s renderer=%s", view, resolved)
    return grid, resolved

def render_pair(
    session: Session, *, renderer: str = "auto", views: Iterable[str] = VIEWS
) -> Dict[str, Tuple[np.ndarray, str]]:
    return {view: render_view(session, view, renderer=renderer) for view in views}

def save_grid(grid: np.ndarray, path: str) -> str:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    to_image(grid).save(path, format="PNG", optimize=True)
    return path
