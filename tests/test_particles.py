#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Particle Pool Tests
================================================================================

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
License:        MIT License
================================================================================
"""

import numpy as np
import pytest
from gas_chamber.particles import (
    DEFAULT_SPECIES,
    Particle,
    ParticlePool,
    Species,
    SpeciesParameters,
)


def make_pool(seed: int = 42) -> ParticlePool:
    return ParticlePool(half_extent=1.5, rng=np.random.default_rng(seed))


class TestSpeciesParameters:
    """Tests for species definitions."""

    def test_default_species(self):
        """Heavy particles are larger and more massive."""
        heavy = DEFAULT_SPECIES[Species.HEAVY]
        light = DEFAULT_SPECIES[Species.LIGHT]
        assert heavy.radius == 0.05
        assert heavy.mass_multiplier == 3.0
        assert light.radius == 0.03
        assert light.mass_multiplier == 1.0

    def test_invalid_parameters(self):
        """Radius and mass must be positive."""
        with pytest.raises(ValueError):
            SpeciesParameters(radius=0.0, mass_multiplier=1.0)
        with pytest.raises(ValueError):
            SpeciesParameters(radius=0.1, mass_multiplier=-2.0)

    def test_species_codes(self):
        """Heavy is stored first."""
        assert Species.HEAVY.code == 0
        assert Species.LIGHT.code == 1


class TestResize:
    """Tests for repopulating a species."""

    def test_resize_creates_particles(self):
        pool = make_pool()
        pool.resize(Species.HEAVY, 40)
        pool.resize(Species.LIGHT, 25)

        assert pool.count(Species.HEAVY) == 40
        assert pool.count(Species.LIGHT) == 25
        assert len(pool) == 65
        assert pool.positions.shape == (65, 3)
        assert pool.velocities.shape == (65, 3)

    def test_non_positive_count_empties_species(self):
        """Zero or negative counts are an empty species, not an error."""
        pool = make_pool()
        pool.resize(Species.HEAVY, 10)
        assert pool.resize(Species.HEAVY, -5) == 0
        assert pool.count(Species.HEAVY) == 0
        assert pool.resize(Species.LIGHT, 0) == 0
        assert len(pool) == 0

    def test_heavy_particles_come_first(self):
        """Combined view keeps heavy particles ahead of light ones."""
        pool = make_pool()
        pool.resize(Species.LIGHT, 5)
        pool.resize(Species.HEAVY, 3)

        assert list(pool.species_codes) == [0, 0, 0, 1, 1, 1, 1, 1]
        assert np.all(pool.radii[:3] == 0.05)
        assert np.all(pool.masses[3:] == 1.0)

    def test_resize_keeps_other_species(self):
        """Repopulating one species leaves the other untouched."""
        pool = make_pool()
        pool.resize(Species.HEAVY, 10)
        pool.resize(Species.LIGHT, 10)
        heavy_before = pool.positions[pool.species_mask(Species.HEAVY)].copy()

        pool.resize(Species.LIGHT, 30)

        assert np.array_equal(pool.positions[pool.species_mask(Species.HEAVY)], heavy_before)
        assert pool.count(Species.LIGHT) == 30

    def test_spawn_positions_inside_margin(self):
        pool = make_pool()
        pool.resize(Species.HEAVY, 500)
        assert np.all(np.abs(pool.positions) <= 1.5 - 0.1)

    def test_spawn_velocity_scales_with_sqrt_mass(self):
        """Velocity components lie in ±spawn_speed/2 · √m."""
        pool = make_pool()
        pool.resize(Species.HEAVY, 500)
        pool.resize(Species.LIGHT, 500)

        heavy_v = pool.velocities[pool.species_mask(Species.HEAVY)]
        light_v = pool.velocities[pool.species_mask(Species.LIGHT)]

        assert np.all(np.abs(heavy_v) <= 0.025 * np.sqrt(3.0))
        assert np.all(np.abs(light_v) <= 0.025)
        assert np.abs(heavy_v).max() > 0.025

    def test_speed_scale(self):
        """Spawn velocities follow the running speed multiplier."""
        pool = make_pool()
        pool.resize(Species.LIGHT, 500, speed_scale=2.0)
        light_v = pool.velocities[pool.species_mask(Species.LIGHT)]
        assert np.all(np.abs(light_v) <= 0.05)
        assert np.abs(light_v).max() > 0.025


class TestInsertAndRemove:
    """Tests for explicit insertion and purging."""

    def test_insert(self):
        pool = make_pool()
        pool.resize(Species.LIGHT, 2)
        pool.insert(Species.HEAVY, [[0.1, 0.2, 0.3]], [[0.01, 0.0, 0.0]])

        assert pool.count(Species.HEAVY) == 1
        assert np.allclose(pool.positions[0], [0.1, 0.2, 0.3])
        assert pool.masses[0] == 3.0

    def test_insert_shape_mismatch(self):
        pool = make_pool()
        with pytest.raises(ValueError):
            pool.insert(Species.HEAVY, [[0.0, 0.0, 0.0]], [[0.0, 0.0]])

    def test_remove_returns_removed(self):
        pool = make_pool()
        pool.resize(Species.HEAVY, 4)
        pool.resize(Species.LIGHT, 4)

        mask = np.zeros(8, dtype=bool)
        mask[[1, 6]] = True
        expected = pool.positions[mask].copy()

        removed = pool.remove(mask)

        assert len(removed) == 2
        assert np.array_equal(removed.positions, expected)
        assert pool.counts() == {Species.HEAVY: 3, Species.LIGHT: 3}

    def test_remove_nothing(self):
        pool = make_pool()
        pool.resize(Species.HEAVY, 4)
        removed = pool.remove(np.zeros(4, dtype=bool))
        assert len(removed) == 0
        assert len(pool) == 4


class TestSnapshot:
    """Tests for the read-only combined view."""

    def test_snapshot_is_read_only(self):
        pool = make_pool()
        pool.resize(Species.HEAVY, 3)
        snapshot = pool.snapshot()

        with pytest.raises(ValueError):
            snapshot.positions[0, 0] = 10.0

    def test_snapshot_is_a_copy(self):
        pool = make_pool()
        pool.resize(Species.HEAVY, 3)
        snapshot = pool.snapshot()
        pool.positions[0, 0] = 99.0
        assert snapshot.positions[0, 0] != 99.0

    def test_snapshot_items_are_tagged(self):
        pool = make_pool()
        pool.resize(Species.HEAVY, 2)
        pool.resize(Species.LIGHT, 1)
        snapshot = pool.snapshot()

        particles = list(snapshot)
        assert len(particles) == 3
        assert all(isinstance(p, Particle) for p in particles)
        assert [p.species for p in particles] == [Species.HEAVY, Species.HEAVY, Species.LIGHT]
        assert particles[2].radius == 0.03
        assert snapshot.count(Species.HEAVY) == 2

    def test_particle_kinetic_energy(self):
        pool = make_pool()
        pool.insert(Species.HEAVY, [[0.0, 0.0, 0.0]], [[0.3, 0.4, 0.0]])
        particle = pool.snapshot()[0]
        assert particle.speed == pytest.approx(0.5)
        assert particle.kinetic_energy == pytest.approx(0.5 * 3.0 * 0.25)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
