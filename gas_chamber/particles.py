#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Species and Particle Pool
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Module:         particles.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================

This module owns the particle population of the gas chamber.

Particles are stored as one combined, species-tagged set of NumPy arrays
(struct-of-arrays) so the Numba kernels in ``physics.py`` can operate on them
directly. Heavy particles always come first, light particles second. The
arrays are only rebuilt when the population changes (resize, insert, purge),
never on a regular tick.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import numpy as np

logger = logging.getLogger("gas_chamber")


class Species(Enum):
    """The two particle classes in the chamber."""
    HEAVY = "heavy"
    LIGHT = "light"

    @property
    def code(self) -> int:
        """Integer tag stored in the species array."""
        return SPECIES_ORDER.index(self)


# Storage order of the combined view
SPECIES_ORDER = (Species.HEAVY, Species.LIGHT)


@dataclass(frozen=True)
class SpeciesParameters:
    """Fixed per-species properties (simulation units)."""
    radius: float
    mass_multiplier: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
        if self.mass_multiplier <= 0:
            raise ValueError(
                f"mass_multiplier must be positive, got {self.mass_multiplier}"
            )


DEFAULT_SPECIES = {
    Species.HEAVY: SpeciesParameters(radius=0.05, mass_multiplier=3.0),
    Species.LIGHT: SpeciesParameters(radius=0.03, mass_multiplier=1.0),
}


@dataclass(frozen=True)
class Particle:
    """Read-only view of a single particle."""
    position: np.ndarray
    velocity: np.ndarray
    species: Species
    radius: float
    mass_multiplier: float

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    @property
    def kinetic_energy(self) -> float:
        return 0.5 * self.mass_multiplier * float(np.dot(self.velocity, self.velocity))


class ParticleSnapshot(Sequence):
    """
    Immutable copy of the combined particle arrays.

    Behaves as a sequence of ``Particle`` objects for iteration, while the
    underlying arrays stay available for vectorized consumers (renderers,
    histograms).
    """

    def __init__(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        species_codes: np.ndarray,
        radii: np.ndarray,
        masses: np.ndarray
    ):
        self.positions = _frozen_copy(positions)
        self.velocities = _frozen_copy(velocities)
        self.species_codes = _frozen_copy(species_codes)
        self.radii = _frozen_copy(radii)
        self.masses = _frozen_copy(masses)

    def __len__(self) -> int:
        return self.positions.shape[0]

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        return Particle(
            position=self.positions[index],
            velocity=self.velocities[index],
            species=SPECIES_ORDER[int(self.species_codes[index])],
            radius=float(self.radii[index]),
            mass_multiplier=float(self.masses[index]),
        )

    def species_mask(self, species: Species) -> np.ndarray:
        return self.species_codes == species.code

    def count(self, species: Species) -> int:
        return int(np.count_nonzero(self.species_mask(species)))


def _frozen_copy(array: np.ndarray) -> np.ndarray:
    copied = np.array(array, copy=True)
    copied.setflags(write=False)
    return copied


class ParticlePool:
    """
    Owns every particle in the chamber.

    Attributes are the live arrays mutated in place by the physics kernels:
        positions:     Nx3 float64
        velocities:    Nx3 float64
        species_codes: N int8 (index into SPECIES_ORDER)
        radii:         N float64
        masses:        N float64 (mass multipliers)
    """

    def __init__(
        self,
        species_params: Optional[Dict[Species, SpeciesParameters]] = None,
        half_extent: float = 1.5,
        spawn_margin: float = 0.1,
        spawn_speed: float = 0.05,
        rng: Optional[np.random.Generator] = None
    ):
        self.species_params = dict(species_params or DEFAULT_SPECIES)
        self.half_extent = half_extent
        self.spawn_margin = spawn_margin
        self.spawn_speed = spawn_speed
        self.rng = rng if rng is not None else np.random.default_rng()

        self.positions = np.zeros((0, 3))
        self.velocities = np.zeros((0, 3))
        self.species_codes = np.zeros(0, dtype=np.int8)
        self.radii = np.zeros(0)
        self.masses = np.zeros(0)

    def __len__(self) -> int:
        return self.positions.shape[0]

    def species_mask(self, species: Species) -> np.ndarray:
        return self.species_codes == species.code

    def count(self, species: Optional[Species] = None) -> int:
        """Number of particles of one species, or of all species."""
        if species is None:
            return len(self)
        return int(np.count_nonzero(self.species_mask(species)))

    def counts(self) -> Dict[Species, int]:
        return {species: self.count(species) for species in SPECIES_ORDER}

    def resize(self, species: Species, count: int, speed_scale: float = 1.0) -> int:
        """
        Replace every particle of ``species`` with ``count`` fresh ones.

        Positions are uniform inside the container minus the spawn margin.
        Velocity components are uniform in ±spawn_speed/2 scaled by
        sqrt(mass multiplier) and by ``speed_scale`` (the current thermal
        multiplier, so new particles join at the running temperature).

        Args:
            species: Species to repopulate
            count: New population; non-positive means an empty species
            speed_scale: Extra factor applied to spawn velocities

        Returns:
            Number of particles created
        """
        count = max(int(count), 0)
        params = self.species_params[species]

        bound = max(self.half_extent - self.spawn_margin, 0.0)
        positions = self.rng.uniform(-bound, bound, size=(count, 3))

        amplitude = 0.5 * self.spawn_speed * np.sqrt(params.mass_multiplier) * speed_scale
        velocities = self.rng.uniform(-amplitude, amplitude, size=(count, 3))

        self._replace_species(species, positions, velocities)
        logger.info(f"Resized {species.value} species to {count} particles")
        return count

    def insert(self, species: Species, positions, velocities) -> None:
        """Append particles with explicit state (keeps species ordering)."""
        positions = np.atleast_2d(np.asarray(positions, dtype=np.float64))
        velocities = np.atleast_2d(np.asarray(velocities, dtype=np.float64))
        if positions.shape != velocities.shape or positions.shape[1] != 3:
            raise ValueError("positions and velocities must both be Mx3 arrays")

        mask = self.species_mask(species)
        self._replace_species(
            species,
            np.vstack([self.positions[mask], positions]),
            np.vstack([self.velocities[mask], velocities]),
        )

    def remove(self, mask: np.ndarray) -> ParticleSnapshot:
        """
        Remove the particles selected by ``mask``.

        Returns:
            Snapshot of the removed particles, for renderer disposal
        """
        removed = ParticleSnapshot(
            self.positions[mask], self.velocities[mask],
            self.species_codes[mask], self.radii[mask], self.masses[mask]
        )
        if len(removed) > 0:
            keep = ~mask
            self.positions = np.ascontiguousarray(self.positions[keep])
            self.velocities = np.ascontiguousarray(self.velocities[keep])
            self.species_codes = self.species_codes[keep]
            self.radii = self.radii[keep]
            self.masses = self.masses[keep]
        return removed

    def snapshot(self) -> ParticleSnapshot:
        return ParticleSnapshot(
            self.positions, self.velocities, self.species_codes, self.radii, self.masses
        )

    def _replace_species(
        self,
        species: Species,
        positions: np.ndarray,
        velocities: np.ndarray
    ) -> None:
        """Rebuild the combined arrays with new state for one species."""
        blocks = []
        for other in SPECIES_ORDER:
            if other is species:
                blocks.append((other, positions, velocities))
            else:
                mask = self.species_mask(other)
                blocks.append((other, self.positions[mask], self.velocities[mask]))

        self.positions = np.ascontiguousarray(np.vstack([b[1] for b in blocks]), dtype=np.float64)
        self.velocities = np.ascontiguousarray(np.vstack([b[2] for b in blocks]), dtype=np.float64)
        self.species_codes = np.concatenate([
            np.full(len(b[1]), b[0].code, dtype=np.int8) for b in blocks
        ])
        self.radii = np.concatenate([
            np.full(len(b[1]), self.species_params[b[0]].radius) for b in blocks
        ])
        self.masses = np.concatenate([
            np.full(len(b[1]), self.species_params[b[0]].mass_multiplier) for b in blocks
        ])
