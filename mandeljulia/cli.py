from __future__ import annotations

import argparse
import logging
import os
import subprocess
from typing import Any, Dict, Optional

from mandeljulia.colormaps import colormap_names
from mandeljulia.config import RENDERER_CHOICES, load_config, normalise_config, session_from_config
from mandeljulia.dynamics import formula_names
from mandeljulia.escape import orbit
from mandeljulia.pipeline import render_pair, renderer_info, save_grid
from mandeljulia.session import VIEWS
from mandeljulia.util.logging_setup import configure_root_logging, get_logger, shutdown_logging
from mandeljulia.util.manifest import build_manifest, write_manifest
from mandeljulia.viewport import pixel_in_bounds, plane_to_pixel

def _git_commit() -> Optional[str]:
    try:
        r = subprocess.run(["git", "rev-parse", "HEAD"], capture_output=True, text=True, check=True)
        return r.stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        return None

def _add_session_overrides(p: argparse.ArgumentParser) -> None:
    p.add_argument("--formula", type=str, default=None, choices=formula_names(), help="Fractal formula.")
    p.add_argument("--max-iter", type=int, default=None, help="Iteration cap.")
    p.add_argument("--resolution", type=int, default=None, help="Side of the square pixel grid.")
    p.add_argument("--c", type=float, nargs=2, default=None, metavar=("RE", "IM"), help="Julia parameter c.")
    p.add_argument("--z", type=float, nargs=2, default=None, metavar=("RE", "IM"), help="Pointer value z.")

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mandeljulia", description="Mandelbrot/Julia pair renderer (CPU/GPU).")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, uses built-in defaults.")
    p.add_argument("--renderer", type=str, default=None, choices=list(RENDERER_CHOICES), help="Renderer selection.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="mandeljulia.log", help="Log file path (rotating). Set empty to disable file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render the Mandelbrot and/or Julia view to PNG.")
    _add_session_overrides(r)
    r.add_argument("--view", type=str, default="both", choices=["both", *VIEWS], help="Which view to render.")
    r.add_argument("--colormap", type=str, default=None, choices=colormap_names(), help="Colormap.")
    r.add_argument("--zoom", type=float, default=None, help="Zoom factor applied around the view's pointer (<1 zooms in).")
    r.add_argument("--output-dir", type=str, default=None, help="Override output_dir from config.")
    r.add_argument("--manifest", type=str, default=os.path.join("artifacts", "run.json"), help="Run manifest path.")

    o = sub.add_parser("orbit", help="Print successive pointer positions z -> f(z, c).")
    _add_session_overrides(o)
    o.add_argument("--steps", type=int, default=10, help="Number of iterations to apply.")

    loc = sub.add_parser("locate", help="Convert between pixel and plane coordinates for a view.")
    _add_session_overrides(loc)
    loc.add_argument("--view", type=str, default="mandelbrot", choices=list(VIEWS))
    g = loc.add_mutually_exclusive_group(required=True)
    g.add_argument("--pixel", type=float, nargs=2, metavar=("PX", "PY"))
    g.add_argument("--point", type=float, nargs=2, metavar=("RE", "IM"))

    return p

def _apply_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    overrides = {
        "renderer": args.renderer,
        "formula": getattr(args, "formula", None),
        "colormap": getattr(args, "colormap", None),
        "max_iterations": getattr(args, "max_iter", None),
        "resolution": getattr(args, "resolution", None),
        "c": getattr(args, "c", None),
        "z": getattr(args, "z", None),
        "output_dir": getattr(args, "output_dir", None),
    }
    out = dict(cfg)
    out.update({k: v for k, v in overrides.items() if v is not None})
    return out

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    configure_root_logging(level=log_level, console=True, log_file=log_file)
    logger = get_logger()

    try:
        cfg = normalise_config(_apply_overrides(load_config(args.config), args))
        session = session_from_config(cfg)

        if args.cmd == "render":
            views = list(VIEWS) if args.view == "both" else [args.view]
            if args.zoom is not None:
                for view in views:
                    session.zoom_view(view, args.zoom)

            rendered = render_pair(session, renderer=cfg["renderer"], views=views)
            outputs = {}
            backends = {}
            for view, (grid, backend) in rendered.items():
                path = save_grid(grid, os.path.join(cfg["output_dir"], f"{view}_{session.formula.name}.png"))
                outputs[view] = path
                backends[view] = backend
                logger.info("Saved %s view -> %s (renderer=%s)", view, path, backend)

            used = sorted(set(backends.values()))
            rinfo = renderer_info(used[0] if len(used) == 1 else "mixed")
            rinfo["views"] = backends
            manifest = build_manifest(config=cfg, renderer_info=rinfo, git_commit=_git_commit(), outputs=outputs)
            write_manifest(args.manifest, manifest)
            logger.info("Run manifest written: %s", args.manifest)
            return 0

        if args.cmd == "orbit":
            points = orbit(session.z, session.c, session.formula, args.steps)
            for n, point in enumerate(points):
                px, py = plane_to_pixel(point, session.domains["julia"], session.resolution)
                marker = "" if pixel_in_bounds((px, py), session.resolution) else "  (off view)"
                print(f"{n}\t{point[0]!r}\t{point[1]!r}\t{px:.2f}\t{py:.2f}{marker}")
            return 0

        if args.cmd == "locate":
            if args.pixel is not None:
                re, im = session.plane_point(args.view, tuple(args.pixel))
                print(f"{re!r}\t{im!r}")
            else:
                px, py = plane_to_pixel(tuple(args.point), session.domains[args.view], session.resolution)
                print(f"{px!r}\t{py!r}")
            return 0

        raise RuntimeError("Unknown command.")
    finally:
        shutdown_logging()
