#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Kinetic Gas Chamber - Command Line Interface
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Module:         main.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================

Command line interface for running the kinetic gas chamber headless and
saving summary plots.
"""

import argparse
import logging
import time
from typing import Dict, List, Optional

import matplotlib.pyplot as plt

from gas_chamber.logger_setup import setup_logging
from gas_chamber.particles import Species
from gas_chamber.simulation import GasSimulation, SimulationCommand, SimulationConfig
from gas_chamber.visualization import render_dashboard

logger = logging.getLogger("gas_chamber")


def _record(history: Dict[str, List[float]], sim: GasSimulation) -> None:
    report = sim.last_report
    history['time'].append(report.elapsed_time)
    history['temperature'].append(report.temperature)
    history['pressure'].append(report.thermo.pressure_atm)


def _save_dashboard(sim: GasSimulation, history: Dict[str, List[float]], filename: str) -> None:
    speed, energy = sim.histograms()
    fig = render_dashboard(
        sim.pool.snapshot(), sim.container, speed, energy, history,
        max_pressure_atm=sim.config.max_pressure_atm
    )
    fig.savefig(filename, dpi=150)
    plt.close(fig)
    logger.info(f"Plot saved to {filename}")


def _log_state(sim: GasSimulation) -> None:
    report = sim.last_report
    speeds = report.average_speeds
    logger.info(
        f"Tick {report.tick:5d}: T = {report.temperature:7.1f} K, "
        f"P = {report.thermo.pressure_atm:8.2f} atm, "
        f"N = {report.counts[Species.HEAVY]}/{report.counts[Species.LIGHT]}, "
        f"<v> heavy = {speeds[Species.HEAVY] or 0.0:.3e} m/s, "
        f"<v> light = {speeds[Species.LIGHT] or 0.0:.3e} m/s"
    )


def run_equilibration_test(
    n_heavy: int = 100,
    n_light: int = 100,
    n_ticks: int = 1000,
    seed: Optional[int] = None
) -> GasSimulation:
    """
    Run at room temperature and check the observables stay consistent.

    Args:
        n_heavy: Number of heavy particles
        n_light: Number of light particles
        n_ticks: Number of ticks
        seed: Random seed

    Returns:
        The finished simulation
    """
    logger.info("Kinetic Gas Chamber - Equilibration Test")
    sim = GasSimulation(SimulationConfig(
        initial_heavy=n_heavy, initial_light=n_light, seed=seed
    ))

    history = {'time': [], 'temperature': [], 'pressure': []}
    t_start = time.time()

    for tick in range(n_ticks):
        sim.tick()
        _record(history, sim)
        if tick % 200 == 0:
            _log_state(sim)

    elapsed = time.time() - t_start
    logger.info(f"Completed {n_ticks} ticks in {elapsed:.2f} s ({n_ticks / max(elapsed, 1e-9):.1f} ticks/s)")
    _log_state(sim)

    _save_dashboard(sim, history, 'equilibration_test.png')
    return sim


def run_heating_demo(
    target_temperature: float = 3000.0,
    n_heavy: int = 150,
    n_light: int = 150,
    n_ticks: int = 2000,
    seed: Optional[int] = None
) -> GasSimulation:
    """
    Heat the chamber toward ``target_temperature`` until it bursts.

    Args:
        target_temperature: Target temperature in kelvin
        n_heavy: Number of heavy particles
        n_light: Number of light particles
        n_ticks: Number of ticks
        seed: Random seed

    Returns:
        The finished simulation
    """
    logger.info("Kinetic Gas Chamber - Heating Demonstration")
    sim = GasSimulation(SimulationConfig(
        initial_heavy=n_heavy, initial_light=n_light, seed=seed
    ))
    sim.submit(SimulationCommand(target_temperature=target_temperature))

    history = {'time': [], 'temperature': [], 'pressure': []}
    for tick in range(n_ticks):
        was_exploded = sim.exploded
        sim.tick()
        _record(history, sim)
        if sim.exploded and not was_exploded:
            logger.info(f"Container burst at tick {tick}")
            _log_state(sim)
        elif tick % 200 == 0:
            _log_state(sim)

    _save_dashboard(sim, history, 'heating_demo.png')
    return sim


def run_effusion_demo(
    aperture_radius: float = 1.0,
    n_heavy: int = 150,
    n_light: int = 150,
    n_ticks: int = 3000,
    seed: Optional[int] = None
) -> GasSimulation:
    """
    Open the aperture and watch light particles escape faster than heavy ones.

    Args:
        aperture_radius: Radius of the hole in the +x face
        n_heavy: Number of heavy particles
        n_light: Number of light particles
        n_ticks: Number of ticks
        seed: Random seed

    Returns:
        The finished simulation
    """
    logger.info("Kinetic Gas Chamber - Effusion Demonstration")
    sim = GasSimulation(SimulationConfig(
        initial_heavy=n_heavy, initial_light=n_light, seed=seed
    ))
    sim.submit(SimulationCommand(effusion_enabled=True, aperture_radius=aperture_radius))

    history = {'time': [], 'temperature': [], 'pressure': []}
    for tick in range(n_ticks):
        sim.tick()
        _record(history, sim)
        if tick % 250 == 0:
            _log_state(sim)

    _log_state(sim)
    _save_dashboard(sim, history, 'effusion_demo.png')
    return sim


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Kinetic Gas Chamber - Two-species hard-sphere gas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --test              Run equilibration test
  python main.py --heat              Heat the chamber until it bursts
  python main.py --effusion          Open the aperture and let gas escape
        """
    )

    parser.add_argument('--test', action='store_true',
                       help='Run equilibration test')
    parser.add_argument('--heat', action='store_true',
                       help='Run heating demonstration')
    parser.add_argument('--effusion', action='store_true',
                       help='Run effusion demonstration')
    parser.add_argument('--heavy', type=int, default=100,
                       help='Number of heavy particles (default: 100)')
    parser.add_argument('--light', type=int, default=100,
                       help='Number of light particles (default: 100)')
    parser.add_argument('--ticks', '-t', type=int, default=1000,
                       help='Number of ticks (default: 1000)')
    parser.add_argument('--temperature', type=float, default=3000.0,
                       help='Target temperature for --heat in K (default: 3000)')
    parser.add_argument('--seed', type=int, default=None,
                       help='Random seed')
    parser.add_argument('--log-level', default='INFO',
                       help='Logging level (default: INFO)')
    parser.add_argument('--log-dir', default=None,
                       help='Write a run log under this directory')

    args = parser.parse_args()
    setup_logging(args.log_level, log_dir=args.log_dir)

    if args.test:
        run_equilibration_test(args.heavy, args.light, args.ticks, args.seed)
    elif args.heat:
        run_heating_demo(args.temperature, args.heavy, args.light, args.ticks, args.seed)
    elif args.effusion:
        run_effusion_demo(
            n_heavy=args.heavy, n_light=args.light, n_ticks=args.ticks, seed=args.seed
        )
    else:
        parser.print_help()
        print("\nNo action specified. Run with --test, --heat, or --effusion")


if __name__ == "__main__":
    main()
