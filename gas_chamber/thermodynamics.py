#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Thermodynamics, Temperature Control and Distributions
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Module:         thermodynamics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================

This module turns the microscopic state of the chamber into macroscopic
observables, including:
- Temperature control through a global speed multiplier
- Temperature and ideal-gas pressure (P = nRT / V)
- The latched over-pressure ("explosion") condition
- Speed and kinetic energy histograms per species

Temperature is tied to the speed multiplier through equipartition: the mean
kinetic energy scales with T, so particle speeds scale with √T and

    T = multiplier² × T_room
"""

import logging
import numpy as np
from typing import Dict, Optional
from dataclasses import dataclass, field
from enum import Enum

from .particles import SPECIES_ORDER, Species

logger = logging.getLogger("gas_chamber")


# Physical constants
GAS_CONSTANT = 8.314          # J / (mol K)
ROOM_TEMPERATURE = 293.0      # K
ATM_IN_PA = 101325.0
PSI_PER_ATM = 14.696
NM_TO_METERS = 1e-9
MOLES_PER_PARTICLE = 1.66e-22

# Lowest temperature accepted as a target, keeps the multiplier positive
MIN_TARGET_TEMPERATURE = 0.1


class TemperatureMapping(Enum):
    """
    Conventions for turning a temperature input into a target multiplier.

    EQUIPARTITION: input in kelvin, multiplier = √(T / T_room). Consistent
                   with the temperature readout; this is the default.
    LINEAR:        input in kelvin, multiplier = T / T_room (slider
                   convention, the readout will not match the input).
    EXPONENTIAL:   input is a relative slider exponent s, multiplier = 2^s.
    """
    EQUIPARTITION = "equipartition"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class ThermalTrend(Enum):
    """Whether the chamber is currently being heated or cooled."""
    HEATING = "heating"
    COOLING = "cooling"
    STEADY = "steady"


class PressureUnit(Enum):
    ATM = "atm"
    KPA = "kPa"
    PA = "Pa"
    PSI = "psi"


class TemperatureUnit(Enum):
    KELVIN = "K"
    CELSIUS = "C"
    FAHRENHEIT = "F"


def convert_pressure(pressure_pa: float, unit: PressureUnit) -> float:
    """Convert a pressure in pascal to the requested display unit."""
    if unit is PressureUnit.PA:
        return pressure_pa
    if unit is PressureUnit.KPA:
        return pressure_pa / 1000.0
    if unit is PressureUnit.ATM:
        return pressure_pa / ATM_IN_PA
    if unit is PressureUnit.PSI:
        return pressure_pa / ATM_IN_PA * PSI_PER_ATM
    raise ValueError(f"Unknown pressure unit: {unit}")


def convert_temperature(kelvin: float, unit: TemperatureUnit) -> float:
    """Convert a temperature in kelvin to the requested display unit."""
    if unit is TemperatureUnit.KELVIN:
        return kelvin
    if unit is TemperatureUnit.CELSIUS:
        return kelvin - 273.15
    if unit is TemperatureUnit.FAHRENHEIT:
        return (kelvin - 273.15) * 9.0 / 5.0 + 32.0
    raise ValueError(f"Unknown temperature unit: {unit}")


def target_multiplier(
    value: float,
    mapping: TemperatureMapping = TemperatureMapping.EQUIPARTITION,
    room_temperature: float = ROOM_TEMPERATURE
) -> float:
    """
    Map a temperature input to a target speed multiplier.

    Args:
        value: Temperature in kelvin, or slider exponent for EXPONENTIAL
        mapping: Active mapping convention
        room_temperature: Temperature at multiplier 1

    Returns:
        Positive target multiplier
    """
    if mapping is TemperatureMapping.EXPONENTIAL:
        return 2.0 ** value

    kelvin = max(value, MIN_TARGET_TEMPERATURE)
    if mapping is TemperatureMapping.EQUIPARTITION:
        return float(np.sqrt(kelvin / room_temperature))
    if mapping is TemperatureMapping.LINEAR:
        return kelvin / room_temperature
    raise ValueError(f"Unknown temperature mapping: {mapping}")


@dataclass
class ThermalState:
    """Global speed multipliers."""
    current: float = 1.0
    target: float = 1.0


class ThermalController:
    """
    Drive the speed multiplier toward its target.

    Proportional (exponential) convergence:
        current += (target - current) * rate
    snapping to the target once the gap drops below epsilon. Because
    0 < rate < 1 the multiplier never overshoots.
    """

    def __init__(
        self,
        room_temperature: float = ROOM_TEMPERATURE,
        convergence_rate: float = 0.05,
        epsilon: float = 1e-4
    ):
        if not 0.0 < convergence_rate < 1.0:
            raise ValueError(
                f"convergence_rate must lie in (0, 1), got {convergence_rate}"
            )
        if epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")

        self.room_temperature = room_temperature
        self.convergence_rate = convergence_rate
        self.epsilon = epsilon
        self.mapping = TemperatureMapping.EQUIPARTITION
        self.state = ThermalState()

    @property
    def current(self) -> float:
        return self.state.current

    @property
    def target(self) -> float:
        return self.state.target

    @property
    def target_temperature(self) -> float:
        return self.state.target ** 2 * self.room_temperature

    def set_target_temperature(
        self,
        value: float,
        mapping: Optional[TemperatureMapping] = None
    ) -> float:
        """Set the target from a temperature input; returns the new target."""
        if mapping is not None:
            self.mapping = mapping
        self.state.target = target_multiplier(value, self.mapping, self.room_temperature)
        logger.info(
            f"Target temperature input {value:.3f} ({self.mapping.value}) "
            f"-> multiplier {self.state.target:.4f}"
        )
        return self.state.target

    def set_target_multiplier(self, multiplier: float) -> None:
        if multiplier <= 0:
            raise ValueError(f"multiplier must be positive, got {multiplier}")
        self.state.target = multiplier

    def update(self) -> float:
        """
        Advance the multiplier by one step.

        Returns:
            Ratio new / previous multiplier, the factor to apply to every
            particle velocity
        """
        previous = self.state.current
        gap = self.state.target - previous

        if abs(gap) < self.epsilon:
            self.state.current = self.state.target
        else:
            self.state.current = previous + gap * self.convergence_rate
            if abs(self.state.target - self.state.current) < self.epsilon:
                self.state.current = self.state.target

        if previous <= 0:
            return 1.0
        return self.state.current / previous

    def rescale(self, velocities: np.ndarray) -> float:
        """Update the multiplier and rescale ``velocities`` in place."""
        ratio = self.update()
        if ratio != 1.0:
            velocities *= ratio
        return ratio

    def trend(self) -> ThermalTrend:
        if self.state.target > self.state.current:
            return ThermalTrend.HEATING
        if self.state.target < self.state.current:
            return ThermalTrend.COOLING
        return ThermalTrend.STEADY

    def reset(self) -> None:
        self.state = ThermalState()


@dataclass
class ThermodynamicState:
    """Macroscopic observables derived from the particle state."""
    temperature: float      # K
    moles: float            # mol
    volume: float           # m³
    pressure: float         # Pa
    particle_count: int

    @property
    def pressure_atm(self) -> float:
        return self.pressure / ATM_IN_PA

    def pressure_in(self, unit: PressureUnit) -> float:
        return convert_pressure(self.pressure, unit)

    def temperature_in(self, unit: TemperatureUnit) -> float:
        return convert_temperature(self.temperature, unit)


@dataclass
class ExplosionState:
    """Over-pressure flag; once set it stays set until cleared."""
    exploded: bool = False

    def latch(self) -> None:
        self.exploded = True

    def clear(self) -> None:
        self.exploded = False


class ThermodynamicsCalculator:
    """
    Ideal gas bookkeeping for the chamber.

    Each particle stands for a fixed (tiny) amount of substance, and one
    simulation length unit corresponds to ``meters_per_unit`` meters.
    Speeds are read out against the reference box edge, so one unit of
    velocity is ``reference_edge * meters_per_unit`` meters per frame.
    """

    def __init__(
        self,
        room_temperature: float = ROOM_TEMPERATURE,
        moles_per_particle: float = MOLES_PER_PARTICLE,
        meters_per_unit: float = 10 * NM_TO_METERS,
        max_pressure_atm: float = 300.0,
        frames_per_second: float = 60.0,
        reference_edge: float = 3.0
    ):
        self.room_temperature = room_temperature
        self.moles_per_particle = moles_per_particle
        self.meters_per_unit = meters_per_unit
        self.max_pressure_atm = max_pressure_atm
        self.frames_per_second = frames_per_second
        self.reference_edge = reference_edge
        self.explosion = ExplosionState()

    def temperature(self, multiplier: float) -> float:
        return multiplier ** 2 * self.room_temperature

    def moles(self, particle_count: int) -> float:
        return particle_count * self.moles_per_particle

    def volume(self, edge_length: float) -> float:
        """Container volume in m³ for an edge length in simulation units."""
        return (edge_length * self.meters_per_unit) ** 3

    def pressure(self, moles: float, temperature: float, volume: float) -> float:
        """P = nRT / V in pascal; zero for a degenerate volume."""
        if volume <= 0:
            return 0.0
        return moles * GAS_CONSTANT * temperature / volume

    def compute(
        self,
        multiplier: float,
        particle_count: int,
        edge_length: float
    ) -> ThermodynamicState:
        temperature = self.temperature(multiplier)
        moles = self.moles(particle_count)
        volume = self.volume(edge_length)
        return ThermodynamicState(
            temperature=temperature,
            moles=moles,
            volume=volume,
            pressure=self.pressure(moles, temperature, volume),
            particle_count=particle_count,
        )

    def check_explosion(self, state: ThermodynamicState) -> bool:
        """
        Latch the explosion flag if the pressure limit is exceeded.

        Returns:
            True only on the tick the flag becomes set
        """
        if self.explosion.exploded:
            return False
        if state.pressure_atm > self.max_pressure_atm:
            self.explosion.latch()
            logger.warning(
                f"Pressure {state.pressure_atm:.2f} atm exceeded limit "
                f"{self.max_pressure_atm:.2f} atm, container exploded"
            )
            return True
        return False

    def average_speed(self, velocities: np.ndarray) -> Optional[float]:
        """
        Mean particle speed in m/s, or None for an empty set.

        Velocities are in simulation units per frame.
        """
        if velocities.shape[0] == 0:
            return None
        mean_speed = float(np.mean(np.linalg.norm(velocities, axis=1)))
        meters_per_frame = self.reference_edge * self.meters_per_unit
        return mean_speed * meters_per_frame * self.frames_per_second

    def reset(self) -> None:
        self.explosion.clear()


HISTOGRAM_PROPERTIES = ("speed", "kinetic_energy")


def extract_property(
    velocities: np.ndarray,
    masses: np.ndarray,
    prop: str
) -> np.ndarray:
    """
    Per-particle values for a histogram.

    speed:          |v|
    kinetic_energy: 0.5 m |v|²
    """
    if prop not in HISTOGRAM_PROPERTIES:
        raise ValueError(
            f"Unknown histogram property: {prop!r}, expected one of {HISTOGRAM_PROPERTIES}"
        )
    v_sq = np.sum(velocities ** 2, axis=1)
    if prop == "speed":
        return np.sqrt(v_sq)
    return 0.5 * masses * v_sq


@dataclass
class Histogram:
    """Per-species bin counts over a shared value range."""
    prop: str
    bin_edges: np.ndarray   # left edge of each bin
    bin_width: float
    max_value: float
    counts: Dict[Species, np.ndarray] = field(default_factory=dict)


class HistogramBinner:
    """
    Bucket speeds or kinetic energies into display-ready distributions.

    The upper end of the axis is max(headroom × observed max, floor), so the
    axis never collapses when the gas is at rest.
    """

    def __init__(
        self,
        num_bins: int = 30,
        reference_floors: Optional[Dict[str, float]] = None,
        headroom: float = 1.1
    ):
        if num_bins <= 0:
            raise ValueError(f"num_bins must be positive, got {num_bins}")
        self.num_bins = num_bins
        self.reference_floors = reference_floors or {
            "speed": 0.2,
            "kinetic_energy": 0.02,
        }
        self.headroom = headroom

    def bin_values(self, values: np.ndarray, minimum: float, maximum: float) -> np.ndarray:
        """
        Count values per bin; out-of-range indices are clamped to the edges.
        """
        bin_width = (maximum - minimum) / self.num_bins
        if len(values) == 0:
            return np.zeros(self.num_bins, dtype=np.int64)
        if bin_width <= 0:
            indices = np.zeros(len(values), dtype=np.int64)
        else:
            indices = np.floor((values - minimum) / bin_width).astype(np.int64)
            indices = np.clip(indices, 0, self.num_bins - 1)
        return np.bincount(indices, minlength=self.num_bins)

    def compute(
        self,
        velocities: np.ndarray,
        masses: np.ndarray,
        species_codes: np.ndarray,
        prop: str = "speed"
    ) -> Histogram:
        """
        Build per-species histograms of ``prop``.

        Args:
            velocities: Nx3 array of velocities
            masses: Mass multipliers
            species_codes: Species tag of each particle
            prop: "speed" or "kinetic_energy"

        Returns:
            Histogram whose counts for each species sum to that species'
            particle count
        """
        values = extract_property(velocities, masses, prop)
        observed_max = float(np.max(values)) if len(values) > 0 else 0.0
        maximum = max(observed_max * self.headroom, self.reference_floors[prop])
        minimum = 0.0
        bin_width = (maximum - minimum) / self.num_bins

        histogram = Histogram(
            prop=prop,
            bin_edges=minimum + bin_width * np.arange(self.num_bins),
            bin_width=bin_width,
            max_value=maximum,
        )
        for species in SPECIES_ORDER:
            mask = species_codes == species.code
            histogram.counts[species] = self.bin_values(values[mask], minimum, maximum)
        return histogram
