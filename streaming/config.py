"""YAML case loading with inheritance.

Supports a `base:` key for case inheritance with deep merge, so a sweep
over Re or ε only restates what changes.
"""

import copy
from pathlib import Path

import numpy as np
import yaml


DEFAULT_OUTPUTS = ['fields', 'profiles']


def _deep_merge(base, overrides):
    """Recursively merge overrides into base dict.

    - Scalars in overrides replace base values
    - Dicts are merged recursively
    - None values in overrides remove the key
    """
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _resolve_case(name, raw, all_raw, resolved_cache, stack=()):
    """Resolve a single case, following base references.

    Parameters
    ----------
    name : str
        Case name.
    raw : dict
        Raw case dict.
    all_raw : dict
        All raw cases (for base resolution).
    resolved_cache : dict
        Cache of already-resolved cases.
    stack : tuple
        Names being resolved, to detect cycles.

    Returns
    -------
    dict : Resolved case (base fields merged in).
    """
    if name in resolved_cache:
        return resolved_cache[name]
    if name in stack:
        chain = ' -> '.join(stack + (name,))
        raise ValueError(f"Circular base reference: {chain}")

    if 'base' in raw:
        base_name = raw['base']
        if base_name not in all_raw:
            raise ValueError(f"Case '{name}' references unknown base '{base_name}'")
        base_resolved = _resolve_case(
            base_name, all_raw[base_name], all_raw, resolved_cache,
            stack + (name,),
        )
        overrides = {k: v for k, v in raw.items() if k != 'base'}
        resolved = _deep_merge(base_resolved, overrides)
    else:
        resolved = copy.deepcopy(raw)

    resolved_cache[name] = resolved
    return resolved


def load_config(path):
    """Load streaming cases from YAML.

    Supports:
    - Single case: `case:` top-level key
    - Multiple cases: `cases:` top-level key with inheritance
    - Output control: `outputs:` list

    Parameters
    ----------
    path : str or Path
        Path to YAML file.

    Returns
    -------
    dict with keys:
        cases : dict of {name: resolved_case}
        outputs : list of output types
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raise ValueError(f"Empty config file: {path}")
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    if 'case' in raw and 'cases' not in raw:
        cases_raw = {'default': raw['case']}
    elif 'cases' in raw:
        cases_raw = raw['cases']
    else:
        cases_raw = {'default': {k: v for k, v in raw.items() if k != 'outputs'}}

    resolved_cache = {}
    cases = {}
    for name, cfg in cases_raw.items():
        cases[name] = _resolve_case(name, cfg or {}, cases_raw, resolved_cache)

    outputs = raw.get('outputs', list(DEFAULT_OUTPUTS))

    return {
        'cases': cases,
        'outputs': outputs,
    }


def build_case_spec(cfg):
    """Convert a resolved case dict into a normalized case specification.

    Parameters
    ----------
    cfg : dict
        Resolved case from load_config.

    Returns
    -------
    dict with keys:
        epsilon : float
        Re : float
        radial : dict — r_max, n, spacing
        grid : dict — type plus 'polar' (r_min, r_max, n_r, n_theta) or
            'cartesian' (x_min, x_max, y_min, y_max, nx, ny) bounds
        times : dict — start, stop, n
    """
    epsilon = float(cfg.get('epsilon', 0.1))
    Re = float(cfg.get('Re', 10.0))
    if not np.isfinite(Re) or Re <= 0:
        raise ValueError(f"Re must be positive, got {Re}")
    if epsilon < 0:
        raise ValueError(f"epsilon must be non-negative, got {epsilon}")

    radial_cfg = cfg.get('radial', {}) or {}
    radial = {
        'r_max': float(radial_cfg.get('r_max', 10.0)),
        'n': int(radial_cfg.get('n', 400)),
        'spacing': str(radial_cfg.get('spacing', 'uniform')),
    }
    if radial['r_max'] <= 1:
        raise ValueError(
            f"radial.r_max must exceed the cylinder radius 1, got {radial['r_max']}"
        )
    if radial['n'] < 2:
        raise ValueError(f"radial.n must be at least 2, got {radial['n']}")
    if radial['spacing'] not in ('uniform', 'geometric'):
        raise ValueError(f"Unknown radial spacing '{radial['spacing']}'")

    grid_cfg = cfg.get('grid', {}) or {}
    gtype = grid_cfg.get('type', 'polar')
    if gtype == 'polar':
        grid = {
            'type': 'polar',
            'r_min': float(grid_cfg.get('r_min', 1.0)),
            'r_max': float(grid_cfg.get('r_max', min(5.0, radial['r_max']))),
            'n_r': int(grid_cfg.get('n_r', 40)),
            'n_theta': int(grid_cfg.get('n_theta', 72)),
        }
        if grid['r_min'] < 1:
            raise ValueError(
                f"grid.r_min must be outside the cylinder (>= 1), got {grid['r_min']}"
            )
        r_extent = grid['r_max']
    elif gtype == 'cartesian':
        grid = {
            'type': 'cartesian',
            'x_min': float(grid_cfg.get('x_min', -3.0)),
            'x_max': float(grid_cfg.get('x_max', 3.0)),
            'y_min': float(grid_cfg.get('y_min', -3.0)),
            'y_max': float(grid_cfg.get('y_max', 3.0)),
            'nx': int(grid_cfg.get('nx', 61)),
            'ny': int(grid_cfg.get('ny', 61)),
        }
        r_extent = np.hypot(max(abs(grid['x_min']), abs(grid['x_max'])),
                            max(abs(grid['y_min']), abs(grid['y_max'])))
    else:
        raise ValueError(f"Unknown grid type '{gtype}'")

    if r_extent > radial['r_max']:
        raise ValueError(
            f"Grid extends to r = {r_extent:g}, beyond radial.r_max = "
            f"{radial['r_max']:g}"
        )

    times_cfg = cfg.get('times', {}) or {}
    times = {
        'start': float(times_cfg.get('start', 0.0)),
        'stop': float(times_cfg.get('stop', 2 * np.pi)),
        'n': int(times_cfg.get('n', 16)),
    }
    if times['n'] < 1:
        raise ValueError(f"times.n must be at least 1, got {times['n']}")

    return {
        'epsilon': epsilon,
        'Re': Re,
        'radial': radial,
        'grid': grid,
        'times': times,
    }
