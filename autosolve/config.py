from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .errors import SolverError

DEFAULTS: Dict[str, Any] = {
    "max_rounds": None,        # None -> derived from the initial candidate count
    "search_max_steps": None,  # None -> unbounded backtracking
    "max_moves": None,         # None -> report every move in next_moves
    "log_level": "WARNING",
}

ENV_VAR = "AUTOSOLVE_CONFIG"

class DotDict(dict):
    __getattr__ = dict.get
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

def load_yaml(path: str | Path) -> DotDict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise SolverError(f"config {path} must hold a mapping, got {type(data).__name__}")
    return DotDict(data)

def merge_overrides(cfg: Dict[str, Any], **overrides) -> Dict[str, Any]:
    for k, v in overrides.items():
        if v is None:
            continue
        cfg[k] = v
    return cfg

COUNT_KEYS = ("max_rounds", "search_max_steps", "max_moves")

def check_counts(cfg: Dict[str, Any]) -> Dict[str, Any]:
    for k in COUNT_KEYS:
        v = cfg.get(k)
        if v is not None and (not isinstance(v, int) or isinstance(v, bool) or v < 0):
            raise SolverError(f"config {k} must be a non-negative integer or null, got {v!r}")
    return cfg

def load_config(path: Optional[str | Path] = None, **overrides) -> DotDict:
    """DEFAULTS, then the YAML file (if any), then non-None keyword overrides."""
    cfg = DotDict(DEFAULTS)
    if path:
        file_cfg = load_yaml(path)
        unknown = sorted(set(file_cfg) - set(DEFAULTS))
        if unknown:
            raise SolverError(f"unknown config keys in {path}: {', '.join(unknown)}")
        cfg.update(file_cfg)
    return check_counts(merge_overrides(cfg, **overrides))

def config_from_env() -> DotDict:
    return load_config(os.environ.get(ENV_VAR) or None)
