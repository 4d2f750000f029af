#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Kinetic Gas Simulation Engine
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Module:         simulation.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================

Tick-driven engine for a two-species hard-sphere gas in a cubic container.

Each tick is split into ceil(time_speed / max_sub_step) equal sub-steps.
Every sub-step runs the full pipeline:
1. Thermal controller moves the speed multiplier, velocities are rescaled
2. Pairwise collisions are resolved
3. Gravity and positions are integrated
4. Walls reflect particles, the aperture lets them escape
5. Escaped particles are purged from the pool
After the sub-steps the ideal-gas observables are derived, the explosion
latch is checked, and every few ticks the histograms are rebuilt.

Parameter changes arrive as SimulationCommand objects and are applied
together at the next tick boundary.
"""

import logging
import math
import numpy as np
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from .particles import (
    DEFAULT_SPECIES,
    SPECIES_ORDER,
    ParticlePool,
    ParticleSnapshot,
    Species,
    SpeciesParameters,
)
from .physics import (
    ApertureConfig,
    Container,
    clamp_to_container,
    find_purged,
    handle_boundaries,
    integrate_positions,
    resolve_collisions,
)
from .thermodynamics import (
    MOLES_PER_PARTICLE,
    NM_TO_METERS,
    ROOM_TEMPERATURE,
    Histogram,
    HistogramBinner,
    PressureUnit,
    TemperatureMapping,
    TemperatureUnit,
    ThermalController,
    ThermalTrend,
    ThermodynamicsCalculator,
    ThermodynamicState,
)

logger = logging.getLogger("gas_chamber")

# Smallest container a command can request; fits two heavy particles
MIN_HALF_EXTENT = 0.1


@dataclass
class SimulationConfig:
    """Configuration for the gas chamber."""
    # Container
    half_extent: float = 1.5
    aperture: ApertureConfig = field(default_factory=ApertureConfig)
    escape_margin: float = 0.5

    # Species and spawning
    heavy: SpeciesParameters = field(default_factory=lambda: DEFAULT_SPECIES[Species.HEAVY])
    light: SpeciesParameters = field(default_factory=lambda: DEFAULT_SPECIES[Species.LIGHT])
    initial_heavy: int = 150
    initial_light: int = 150
    spawn_margin: float = 0.1
    spawn_speed: float = 0.05

    # Temperature control
    room_temperature: float = ROOM_TEMPERATURE
    convergence_rate: float = 0.05
    convergence_epsilon: float = 1e-4

    # Ideal gas conversion
    moles_per_particle: float = MOLES_PER_PARTICLE
    meters_per_unit: float = 10 * NM_TO_METERS
    max_pressure_atm: float = 300.0
    suppress_walls_on_explosion: bool = True
    pressure_unit: PressureUnit = PressureUnit.ATM
    temperature_unit: TemperatureUnit = TemperatureUnit.KELVIN

    # Gravity
    gravity_enabled: bool = False
    gravity_accel: float = 0.005

    # Time integration
    time_speed: float = 1.0
    max_sub_step: float = 1.0
    seconds_per_tick: float = 0.01
    frames_per_second: float = 60.0

    # Distributions
    histogram_bins: int = 30
    histogram_interval: int = 10
    reference_max_speed: float = 0.2
    reference_max_kinetic_energy: float = 0.02

    seed: Optional[int] = None

    @property
    def species_params(self) -> Dict[Species, SpeciesParameters]:
        return {Species.HEAVY: self.heavy, Species.LIGHT: self.light}

    @property
    def initial_counts(self) -> Dict[Species, int]:
        return {Species.HEAVY: self.initial_heavy, Species.LIGHT: self.initial_light}


@dataclass
class SimulationCommand:
    """
    A batch of user inputs. ``None`` leaves a setting unchanged.

    Commands are queued with ``GasSimulation.submit`` and applied together
    at the start of the next tick.
    """
    heavy_count: Optional[int] = None
    light_count: Optional[int] = None
    target_temperature: Optional[float] = None
    temperature_mapping: Optional[TemperatureMapping] = None
    half_extent: Optional[float] = None
    gravity_enabled: Optional[bool] = None
    effusion_enabled: Optional[bool] = None
    aperture_radius: Optional[float] = None
    aperture_center: Optional[Tuple[float, float]] = None
    time_speed: Optional[float] = None
    pressure_unit: Optional[PressureUnit] = None
    temperature_unit: Optional[TemperatureUnit] = None
    paused: Optional[bool] = None
    step: bool = False
    reset: bool = False


@dataclass
class TickReport:
    """Everything the renderer and UI consume after one tick."""
    tick: int
    sub_steps: int
    elapsed_time: float
    snapshot: ParticleSnapshot
    thermo: ThermodynamicState
    counts: Dict[Species, int]
    average_speeds: Dict[Species, Optional[float]]
    moles: Dict[Species, float]
    pressure_display: float
    pressure_unit: PressureUnit
    temperature_display: float
    temperature_unit: TemperatureUnit
    exploded: bool
    trend: ThermalTrend
    wall_hits: int
    impact: float
    collisions: int
    purged: List[ParticleSnapshot] = field(default_factory=list)
    speed_histogram: Optional[Histogram] = None
    energy_histogram: Optional[Histogram] = None

    @property
    def temperature(self) -> float:
        return self.thermo.temperature

    @property
    def purged_count(self) -> int:
        return sum(len(p) for p in self.purged)


class WallCollisionCounter:
    """Optional running count of wall hits with its own stopwatch."""

    def __init__(self):
        self.counting = False
        self.count = 0
        self.elapsed = 0.0

    def start(self) -> None:
        self.counting = True
        self.count = 0
        self.elapsed = 0.0

    def stop(self) -> None:
        self.counting = False

    def reset(self) -> None:
        self.count = 0
        self.elapsed = 0.0

    def record(self, wall_hits: int, dt: float) -> None:
        if self.counting:
            self.count += wall_hits
            self.elapsed += dt


def plan_sub_steps(time_speed: float, max_sub_step: float) -> Tuple[int, float]:
    """
    Split one outer tick into equal sub-steps no larger than ``max_sub_step``.

    Returns:
        (number of sub-steps, size of each sub-step)
    """
    if time_speed <= 0:
        return 0, 0.0
    n_steps = max(1, math.ceil(time_speed / max_sub_step))
    return n_steps, time_speed / n_steps


class GasSimulation:
    """
    Two-species kinetic gas simulation.

    Owns the full simulation state (particles, container, thermal and
    thermodynamic state); only the driving loop mutates it.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        cfg = self.config

        if cfg.max_sub_step <= 0:
            raise ValueError(f"max_sub_step must be positive, got {cfg.max_sub_step}")
        if cfg.histogram_interval <= 0:
            raise ValueError(
                f"histogram_interval must be positive, got {cfg.histogram_interval}"
            )

        self.rng = np.random.default_rng(cfg.seed)
        self.container = Container(
            half_extent=cfg.half_extent,
            aperture=ApertureConfig(
                enabled=cfg.aperture.enabled,
                radius=cfg.aperture.radius,
                center=cfg.aperture.center,
                axis=cfg.aperture.axis,
                sign=cfg.aperture.sign,
            ),
        )
        self.pool = ParticlePool(
            species_params=cfg.species_params,
            half_extent=cfg.half_extent,
            spawn_margin=cfg.spawn_margin,
            spawn_speed=cfg.spawn_speed,
            rng=self.rng,
        )
        self.thermal = ThermalController(
            room_temperature=cfg.room_temperature,
            convergence_rate=cfg.convergence_rate,
            epsilon=cfg.convergence_epsilon,
        )
        self.thermo = ThermodynamicsCalculator(
            room_temperature=cfg.room_temperature,
            moles_per_particle=cfg.moles_per_particle,
            meters_per_unit=cfg.meters_per_unit,
            max_pressure_atm=cfg.max_pressure_atm,
            frames_per_second=cfg.frames_per_second,
            reference_edge=2 * cfg.half_extent,
        )
        self.binner = HistogramBinner(
            num_bins=cfg.histogram_bins,
            reference_floors={
                "speed": cfg.reference_max_speed,
                "kinetic_energy": cfg.reference_max_kinetic_energy,
            },
        )
        self.wall_counter = WallCollisionCounter()

        self.gravity_enabled = cfg.gravity_enabled
        self.time_speed = cfg.time_speed
        self.pressure_unit = cfg.pressure_unit
        self.temperature_unit = cfg.temperature_unit
        self.paused = False
        self.tick_count = 0
        self.elapsed_time = 0.0
        self.last_report: Optional[TickReport] = None
        self._pending: List[SimulationCommand] = []

        for species, count in cfg.initial_counts.items():
            self.pool.resize(species, count)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def exploded(self) -> bool:
        return self.thermo.explosion.exploded

    @property
    def walls_active(self) -> bool:
        return not (self.exploded and self.config.suppress_walls_on_explosion)

    def submit(self, command: SimulationCommand) -> None:
        """Queue a command for the next tick boundary."""
        self._pending.append(command)

    def apply_command(self, command: SimulationCommand) -> bool:
        """
        Apply one command immediately.

        Returns:
            True if the command requested a single step
        """
        if command.reset:
            self.reset()

        if command.heavy_count is not None:
            self.set_population(Species.HEAVY, command.heavy_count)
        if command.light_count is not None:
            self.set_population(Species.LIGHT, command.light_count)

        if command.target_temperature is not None:
            self.thermal.set_target_temperature(
                command.target_temperature, command.temperature_mapping
            )
        elif command.temperature_mapping is not None:
            self.thermal.mapping = command.temperature_mapping

        if command.half_extent is not None:
            self.set_half_extent(max(command.half_extent, MIN_HALF_EXTENT))

        if command.gravity_enabled is not None:
            self.gravity_enabled = command.gravity_enabled

        aperture = self.container.aperture
        if command.effusion_enabled is not None:
            aperture.enabled = command.effusion_enabled
        if command.aperture_radius is not None:
            aperture.radius = max(command.aperture_radius, 0.0)
        if command.aperture_center is not None:
            aperture.center = tuple(command.aperture_center)

        if command.time_speed is not None:
            self.time_speed = max(command.time_speed, 0.0)
        if command.pressure_unit is not None:
            self.pressure_unit = command.pressure_unit
        if command.temperature_unit is not None:
            self.temperature_unit = command.temperature_unit
        if command.paused is not None:
            self.paused = command.paused

        return command.step

    def set_population(self, species: Species, count: int) -> int:
        return self.pool.resize(species, count, speed_scale=self.thermal.current)

    def set_half_extent(self, half_extent: float) -> None:
        """Resize the container and pull every particle back inside."""
        if half_extent <= 0:
            raise ValueError(f"half_extent must be positive, got {half_extent}")
        self.container.half_extent = half_extent
        self.pool.half_extent = half_extent
        clamp_to_container(self.pool.positions, self.pool.radii, half_extent)
        logger.info(f"Container half extent set to {half_extent:.3f}")

    def reset(self) -> None:
        """
        Restore the initial populations and room temperature, clear the
        explosion latch and the clocks.
        """
        self.thermal.reset()
        self.thermo.reset()
        for species, count in self.config.initial_counts.items():
            self.pool.resize(species, count)
        self.tick_count = 0
        self.elapsed_time = 0.0
        self.wall_counter.reset()
        logger.info("Simulation reset to initial populations")

    # ------------------------------------------------------------------
    # Driving loop
    # ------------------------------------------------------------------

    def tick(self) -> Optional[TickReport]:
        """
        Apply queued commands, then advance one outer tick unless paused.

        A queued command with ``step=True`` advances exactly one tick while
        paused.

        Returns:
            The tick report, or None if the simulation is paused
        """
        step_requested = False
        pending, self._pending = self._pending, []
        for command in pending:
            step_requested = self.apply_command(command) or step_requested

        if self.paused and not step_requested:
            return None
        return self._advance()

    def step(self) -> Optional[TickReport]:
        """Advance exactly one tick while paused; no-op while running."""
        if not self.paused:
            return None
        self.submit(SimulationCommand(step=True))
        return self.tick()

    def run(self, n_ticks: int) -> Optional[TickReport]:
        """Run n_ticks outer ticks and return the last report."""
        for _ in range(n_ticks):
            self.tick()
        return self.last_report

    def _advance(self) -> TickReport:
        n_sub_steps, dt = plan_sub_steps(self.time_speed, self.config.max_sub_step)

        wall_hits = 0
        impact = 0.0
        collisions = 0
        purged: List[ParticleSnapshot] = []

        for _ in range(n_sub_steps):
            hits, sub_impact, sub_collisions, removed = self._sub_step(dt)
            wall_hits += hits
            impact += sub_impact
            collisions += sub_collisions
            if len(removed) > 0:
                purged.append(removed)

        self.tick_count += 1

        thermo_state = self.thermo.compute(
            self.thermal.current, len(self.pool), self.container.edge_length
        )
        self.thermo.check_explosion(thermo_state)

        report = TickReport(
            tick=self.tick_count,
            sub_steps=n_sub_steps,
            elapsed_time=self.elapsed_time,
            snapshot=self.pool.snapshot(),
            thermo=thermo_state,
            counts=self.pool.counts(),
            average_speeds=self.average_speeds(),
            moles={
                species: self.thermo.moles(self.pool.count(species))
                for species in SPECIES_ORDER
            },
            pressure_display=thermo_state.pressure_in(self.pressure_unit),
            pressure_unit=self.pressure_unit,
            temperature_display=thermo_state.temperature_in(self.temperature_unit),
            temperature_unit=self.temperature_unit,
            exploded=self.exploded,
            trend=self.thermal.trend(),
            wall_hits=wall_hits,
            impact=impact,
            collisions=collisions,
            purged=purged,
        )

        if self.tick_count % self.config.histogram_interval == 0:
            report.speed_histogram, report.energy_histogram = self.histograms()

        if self.tick_count % 100 == 0:
            logger.debug(
                f"Tick={self.tick_count}, T={thermo_state.temperature:.1f} K, "
                f"P={thermo_state.pressure_atm:.2f} atm, N={len(self.pool)}, "
                f"WallHits={wall_hits}"
            )

        self.last_report = report
        return report

    def _sub_step(self, dt: float) -> Tuple[int, float, int, ParticleSnapshot]:
        pool = self.pool

        self.thermal.rescale(pool.velocities)

        collisions = resolve_collisions(
            pool.positions, pool.velocities, pool.radii, pool.masses
        )

        gravity = self.config.gravity_accel if self.gravity_enabled else 0.0
        integrate_positions(pool.positions, pool.velocities, dt, gravity)

        escaped = np.zeros(len(pool), dtype=np.bool_)
        wall_hits, impact = 0, 0.0
        if self.walls_active:
            aperture = self.container.aperture
            wall_hits, impact = handle_boundaries(
                pool.positions, pool.velocities, pool.radii, pool.masses,
                self.container.half_extent, escaped,
                aperture.enabled, aperture.axis, aperture.sign,
                float(aperture.center[0]), float(aperture.center[1]),
                float(aperture.radius),
            )

        purge_mask = find_purged(
            pool.positions, escaped, self.container.half_extent, self.config.escape_margin
        )
        removed = pool.remove(purge_mask)
        if len(removed) > 0:
            logger.debug(f"Purged {len(removed)} particles")

        step_seconds = self.config.seconds_per_tick * dt
        self.elapsed_time += step_seconds
        self.wall_counter.record(wall_hits, step_seconds)

        return int(wall_hits), float(impact), int(collisions), removed

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    def average_speeds(self) -> Dict[Species, Optional[float]]:
        return {
            species: self.thermo.average_speed(
                self.pool.velocities[self.pool.species_mask(species)]
            )
            for species in SPECIES_ORDER
        }

    def histograms(self) -> Tuple[Histogram, Histogram]:
        """Speed and kinetic energy histograms of the current state."""
        pool = self.pool
        speed = self.binner.compute(pool.velocities, pool.masses, pool.species_codes, "speed")
        energy = self.binner.compute(
            pool.velocities, pool.masses, pool.species_codes, "kinetic_energy"
        )
        return speed, energy

    def thermodynamic_state(self) -> ThermodynamicState:
        return self.thermo.compute(
            self.thermal.current, len(self.pool), self.container.edge_length
        )


def create_default_simulation(
    n_heavy: int = 150,
    n_light: int = 150,
    half_extent: float = 1.5,
    seed: Optional[int] = None
) -> GasSimulation:
    """
    Create a simulation at room temperature with the standard species.

    Args:
        n_heavy: Number of heavy particles
        n_light: Number of light particles
        half_extent: Half edge length of the container
        seed: Random seed for reproducible runs

    Returns:
        Initialized GasSimulation
    """
    config = SimulationConfig(
        half_extent=half_extent,
        initial_heavy=n_heavy,
        initial_light=n_light,
        seed=seed,
    )
    return GasSimulation(config)
