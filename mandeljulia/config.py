import json
from typing import Any, Dict, Optional

from mandeljulia.colormaps import get_colormap
from mandeljulia.dynamics import get_formula
from mandeljulia.session import VIEWS, Session
from mandeljulia.viewport import DEFAULT_DOMAIN, Domain

RENDERER_CHOICES = ("auto", "cpu", "gpu")

def default_config() -> Dict[str, Any]:
    return {
        "resolution": 400,
        "max_iterations": 100,
        "formula": "standard",
        "colormap": "dark_red",
        "table_length": 1000,
        "renderer": "auto",
        "c": [0.0, 0.0],
        "z": [0.0, 0.0],
        "domains": {view: DEFAULT_DOMAIN.as_intervals() for view in VIEWS},
        "output_dir": "renders",
    }

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path:
        return default_config()
    with open(config_path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError("Config JSON must be an object.")
    out = default_config()
    out.update(cfg)
    return out

def _point(value: Any, name: str) -> list:
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise ValueError(f"{name} must be [re, im].")
    return [float(value[0]), float(value[1])]

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    required = ["resolution", "max_iterations", "formula", "colormap"]
    for r in required:
        if r not in cfg:
            raise ValueError(f"Missing config field: {r}")

    resolution = int(cfg["resolution"])
    max_iterations = int(cfg["max_iterations"])
    table_length = int(cfg.get("table_length", 1000))
    if resolution <= 0 or max_iterations <= 0:
        raise ValueError("resolution/max_iterations must be positive.")
    if table_length < 2:
        raise ValueError("table_length must be >= 2.")

    renderer = str(cfg.get("renderer", "auto"))
    if renderer not in RENDERER_CHOICES:
        raise ValueError(f"renderer must be one of: {', '.join(RENDERER_CHOICES)}")

    domains = cfg.get("domains") or {}
    if not isinstance(domains, dict):
        raise ValueError("domains must map view name to [[re_min, re_max], [im_min, im_max]].")
    unknown = set(domains) - set(VIEWS)
    if unknown:
        raise ValueError(f"Unknown views in domains: {sorted(unknown)}")

    out = dict(cfg)
    out["resolution"] = resolution
    out["max_iterations"] = max_iterations
    out["table_length"] = table_length
    out["formula"] = get_formula(str(cfg["formula"])).name
    out["colormap"] = str(cfg["colormap"])
    get_colormap(out["colormap"])
    out["renderer"] = renderer
    out["c"] = _point(cfg.get("c", [0.0, 0.0]), "c")
    out["z"] = _point(cfg.get("z", [0.0, 0.0]), "z")
    out["domains"] = {
        view: Domain.from_intervals(domains.get(view, DEFAULT_DOMAIN.as_intervals())).as_intervals()
        for view in VIEWS
    }
    out["output_dir"] = str(cfg.get("output_dir", "renders"))
    return out

def session_from_config(cfg: Dict[str, Any]) -> Session:
    return Session(
        resolution=cfg["resolution"],
        domains={view: Domain.from_intervals(iv) for view, iv in cfg["domains"].items()},
        z=tuple(cfg["z"]),
        c=tuple(cfg["c"]),
        formula=cfg["formula"],
        colormap=cfg["colormap"],
        max_iterations=cfg["max_iterations"],
        table_length=cfg["table_length"],
    )
