"""Command-line interface for the steady streaming solution.

Usage:
    streaming run cases.yaml [--output-dir DIR] [--verbose]
    streaming example [--Re 10] [--epsilon 0.1] [--plot]
"""

import argparse
import json
import logging
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from streaming.config import load_config, build_case_spec
from streaming.logging_config import setup_logging
from streaming.params import Params
from streaming.amplitude import (
    Grid, evaluate, evaluate_history, cartesian, scale,
)
from streaming.solvers import radial_samples, solve_all
from streaming.plots import plot_profiles, plot_streamlines, plot_velocity

logger = logging.getLogger(__name__)


def main(args=None):
    parser = argparse.ArgumentParser(
        prog='streaming',
        description='Steady streaming around an oscillating cylinder',
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')
    parser.add_argument('--log-file', default=None,
                        help='Also write the log to this file')
    subparsers = parser.add_subparsers(dest='command')

    # --- run command ---
    run_parser = subparsers.add_parser('run', help='Run cases from a YAML file')
    run_parser.add_argument('config', type=str, help='YAML case file')
    run_parser.add_argument('--output-dir', '-o', default=None,
                            help='Output directory (default: ./output)')

    # --- example command ---
    example_parser = subparsers.add_parser('example', help='Quick example')
    example_parser.add_argument('--Re', type=float, default=10.0,
                                help='Scaled Reynolds number')
    example_parser.add_argument('--epsilon', type=float, default=0.1,
                                help='Oscillation amplitude')
    example_parser.add_argument('--plot', action='store_true',
                                help='Show plots interactively')

    parsed = parser.parse_args(args)
    setup_logging(logging.DEBUG if parsed.verbose else logging.WARNING,
                  parsed.log_file)

    try:
        if parsed.command == 'run':
            return cmd_run(parsed)
        elif parsed.command == 'example':
            return cmd_example(parsed)
    except (ValueError, FileNotFoundError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}")
        return 1

    parser.print_help()
    return 1


def build_grid(grid_spec):
    """Evaluation grid from a normalized grid spec.

    Cartesian grids keep only the points outside the cylinder, flattened
    to 1-D.
    """
    if grid_spec['type'] == 'polar':
        r = np.linspace(grid_spec['r_min'], grid_spec['r_max'], grid_spec['n_r'])
        theta = np.linspace(0, 2 * np.pi, grid_spec['n_theta'], endpoint=False)
        R, T = np.meshgrid(r, theta, indexing='ij')
        return Grid.from_polar(R, T)

    x = np.linspace(grid_spec['x_min'], grid_spec['x_max'], grid_spec['nx'])
    y = np.linspace(grid_spec['y_min'], grid_spec['y_max'], grid_spec['ny'])
    X, Y = np.meshgrid(x, y, indexing='ij')
    outside = np.hypot(X, Y) >= 1.0
    return Grid(X[outside], Y[outside])


def cmd_run(args):
    """Run streaming cases from a YAML file."""
    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else Path('output')
    output_dir.mkdir(parents=True, exist_ok=True)

    spec = load_config(config_path)
    outputs = spec.get('outputs', ['fields', 'profiles'])

    summary = {}
    for name, cfg in spec['cases'].items():
        case = build_case_spec(cfg)
        summary[name] = _run_single(case, name, output_dir, outputs)

    _print_summary_table(summary)

    json_path = output_dir / 'summary.json'
    with open(json_path, 'w') as f:
        json.dump(summary, f, indent=2)
    print(f"Saved summary to {json_path}")

    return 0


def _run_single(case, name, output_dir, outputs):
    """Solve and evaluate a single case, writing its outputs."""
    params = Params.from_dict(case)
    radial = case['radial']
    r = radial_samples(radial['r_max'], radial['n'], radial['spacing'])
    s1, s2mean, s2 = solve_all(params, r)
    logger.info("Case %s: solved %d radial samples", name, len(r))

    grid = build_grid(case['grid'])
    mean = scale(evaluate(0.0, grid, s2mean), params.epsilon**2)
    times = np.linspace(case['times']['start'], case['times']['stop'],
                        case['times']['n'])
    history = evaluate_history(times, params, grid, s1, s2mean, s2)

    ux, uy = cartesian(mean, grid)
    mean_speed = np.hypot(ux, uy)
    result = {
        'epsilon': params.epsilon,
        'Re': params.Re,
        'n_radial': len(r),
        'n_grid': int(grid.r.size),
        'n_times': len(times),
        'psi_mean_max': float(np.max(np.abs(mean.psi))),
        'u_mean_max': float(np.max(mean_speed)),
        'psi_max': float(np.max(np.abs(history.psi))),
    }
    print(f"  {name}: Re={params.Re:g}, ε={params.epsilon:g}, "
          f"max|ψ_mean|={result['psi_mean_max']:.4e}, "
          f"max|u_mean|={result['u_mean_max']:.4e}")

    if 'profiles' in outputs:
        _write_profiles_csv(output_dir / f'{name}_profiles.csv',
                            (s1, s2mean, s2), name)
        for label, amp in (('first', s1), ('second_mean', s2mean),
                           ('second', s2)):
            fig, _ = plot_profiles(amp, title=f"{name}: {label} order")
            fig.savefig(output_dir / f'{name}_{label}_profile.png', dpi=150,
                        bbox_inches='tight')
            plt.close(fig)

    if 'fields' in outputs:
        _write_fields_csv(output_dir / f'{name}_fields.csv', grid, mean, name)
        fig, _ = plot_streamlines(grid, mean,
                                  title=f"{name}: steady streaming")
        fig.savefig(output_dir / f'{name}_streaming.png', dpi=150,
                    bbox_inches='tight')
        plt.close(fig)
        fig, _ = plot_velocity(grid, mean,
                               title=f"{name}: mean velocity")
        fig.savefig(output_dir / f'{name}_velocity.png', dpi=150,
                    bbox_inches='tight')
        plt.close(fig)

    return result


def _write_profiles_csv(path, amplitudes, name):
    """Write the complex radial profiles ψ of each order to CSV."""
    s1, s2mean, s2 = amplitudes
    with open(path, 'w') as f:
        f.write(f"# {name} streamfunction amplitudes\n")
        f.write("# r,re_psi1,im_psi1,re_psi2_mean,im_psi2_mean,"
                "re_psi2,im_psi2\n")
        for i, ri in enumerate(s1.r):
            f.write(f"{ri:.8f},"
                    f"{s1.psi[i].real:.10e},{s1.psi[i].imag:.10e},"
                    f"{s2mean.psi[i].real:.10e},{s2mean.psi[i].imag:.10e},"
                    f"{s2.psi[i].real:.10e},{s2.psi[i].imag:.10e}\n")


def _write_fields_csv(path, grid, soln, name):
    """Write an instantaneous field on the grid to CSV."""
    ux, uy = cartesian(soln, grid)
    with open(path, 'w') as f:
        f.write(f"# {name} fields at t = {soln.t:g}\n")
        f.write("# x,y,psi,omega,ur,utheta,ux,uy\n")
        rows = zip(grid.x.ravel(), grid.y.ravel(), soln.psi.ravel(),
                   soln.omega.ravel(), soln.ur.ravel(), soln.utheta.ravel(),
                   ux.ravel(), uy.ravel())
        for row in rows:
            f.write(','.join(f"{v:.8e}" for v in row) + '\n')


def _print_summary_table(summary):
    """Print an aligned summary table."""
    if not summary:
        return
    w_name = max(max(len(n) for n in summary), 4)

    print(f"\n{'Case':<{w_name}}   {'Re':>8}   {'eps':>6}   "
          f"{'max|psi_m|':>11}   {'max|u_m|':>11}")
    print(f"{'-' * w_name}   {'--------':>8}   {'------':>6}   "
          f"{'-----------':>11}   {'-----------':>11}")
    for name, r in summary.items():
        print(f"{name:<{w_name}}   {r['Re']:>8.3g}   {r['epsilon']:>6.3g}   "
              f"{r['psi_mean_max']:>11.4e}   {r['u_mean_max']:>11.4e}")
    print()


def cmd_example(args):
    """Print the streaming solution along the line Θ = π/4."""
    params = Params(args.epsilon, args.Re)
    r = radial_samples(10.0, 400)
    s1, s2mean, s2 = solve_all(params, r)

    print("Steady streaming around an oscillating cylinder")
    print(f"  Re      = {params.Re:g}")
    print(f"  ε       = {params.epsilon:g}")
    print(f"  γ       = {params.gamma:.4f}")
    print(f"  C       = {params.C:.4f}")

    probe_r = np.array([1.0, 1.5, 2.0, 3.0, 5.0, 8.0])
    grid = Grid.from_polar(probe_r, np.pi / 4)
    mean = scale(evaluate(0.0, grid, s2mean), params.epsilon**2)

    print(f"\nMean flow along Θ = 45°:")
    print(f"   {'r':>5}   {'psi':>11}   {'ur':>11}   {'utheta':>11}")
    for i, ri in enumerate(probe_r):
        print(f"   {ri:>5.2f}   {mean.psi[i]:>11.4e}   {mean.ur[i]:>11.4e}"
              f"   {mean.utheta[i]:>11.4e}")

    if args.plot:
        matplotlib.use('TkAgg')
        R, T = np.meshgrid(np.linspace(1, 5, 40),
                           np.linspace(0, 2 * np.pi, 72, endpoint=False),
                           indexing='ij')
        field_grid = Grid.from_polar(R, T)
        field = scale(evaluate(0.0, field_grid, s2mean), params.epsilon**2)
        plot_streamlines(field_grid, field,
                         title=f"Steady streaming (Re={params.Re:g})")
        plt.show()

    return 0
