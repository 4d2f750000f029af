#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Physics Module Tests
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
from gas_chamber.physics import (
    ApertureConfig,
    Container,
    resolve_pair,
    resolve_collisions,
    integrate_positions,
    handle_boundaries,
    find_purged,
    clamp_to_container,
    calculate_kinetic_energy,
    calculate_momentum
)


def run_boundaries(positions, velocities, radii, masses, half_extent=1.5,
                   aperture=None):
    """Call the boundary kernel with an optional aperture."""
    aperture = aperture or ApertureConfig()
    escaped = np.zeros(len(positions), dtype=np.bool_)
    hits, impact = handle_boundaries(
        positions, velocities, radii, masses, half_extent, escaped,
        aperture.enabled, aperture.axis, aperture.sign,
        float(aperture.center[0]), float(aperture.center[1]), float(aperture.radius)
    )
    return hits, impact, escaped


class TestContainer:
    """Tests for container geometry."""

    def test_edge_length(self):
        assert Container(half_extent=1.5).edge_length == 3.0

    def test_invalid_half_extent(self):
        with pytest.raises(ValueError):
            Container(half_extent=0.0)

    def test_invalid_aperture(self):
        with pytest.raises(ValueError):
            ApertureConfig(axis=3)
        with pytest.raises(ValueError):
            ApertureConfig(sign=0)


class TestResolvePair:
    """Tests for elastic impulse resolution."""

    def test_head_on_equal_masses_swap(self):
        """Equal masses closing head-on exchange velocities."""
        r = 0.05
        positions = np.array([[-r, 0.0, 0.0], [r, 0.0, 0.0]])
        velocities = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
        masses = np.array([1.0, 1.0])

        resolved = resolve_pair(positions, velocities, masses, 0, 1, 2 * r)

        assert resolved
        assert np.allclose(velocities[0], [-1.0, 0.0, 0.0])
        assert np.allclose(velocities[1], [1.0, 0.0, 0.0])
        assert np.allclose(velocities.sum(axis=0), 0.0)

    def test_conserves_momentum_and_energy(self):
        """Oblique collision of unequal masses."""
        positions = np.array([[0.0, 0.0, 0.0], [0.07, 0.02, 0.0]])
        velocities = np.array([[0.03, 0.01, -0.005], [-0.02, 0.0, 0.01]])
        masses = np.array([3.0, 1.0])

        p_before = calculate_momentum(velocities, masses)
        ke_before = calculate_kinetic_energy(velocities, masses)

        assert resolve_pair(positions, velocities, masses, 0, 1, 0.08)

        assert np.allclose(calculate_momentum(velocities, masses), p_before, atol=1e-14)
        assert calculate_kinetic_energy(velocities, masses) == pytest.approx(ke_before, rel=1e-12)

    def test_separating_pair_untouched(self):
        """Overlapping but separating pairs are not resolved."""
        positions = np.array([[0.0, 0.0, 0.0], [0.05, 0.0, 0.0]])
        velocities = np.array([[-1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        masses = np.array([1.0, 1.0])
        before_v = velocities.copy()
        before_p = positions.copy()

        assert not resolve_pair(positions, velocities, masses, 0, 1, 0.1)
        assert np.array_equal(velocities, before_v)
        assert np.array_equal(positions, before_p)

    def test_coincident_centers_use_fallback_axis(self):
        """Coincident centers do not produce NaN."""
        positions = np.zeros((2, 3))
        velocities = np.array([[-1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        masses = np.array([1.0, 1.0])

        assert resolve_pair(positions, velocities, masses, 0, 1, 0.1)

        assert np.all(np.isfinite(velocities))
        assert np.all(np.isfinite(positions))
        assert np.allclose(velocities[0], [1.0, 0.0, 0.0])
        # Pushed apart along the fallback x axis
        assert positions[0, 0] - positions[1, 0] == pytest.approx(0.1)

    def test_penetration_is_removed(self):
        """Positional correction leaves the pair exactly touching."""
        positions = np.array([[0.0, 0.0, 0.0], [0.06, 0.0, 0.0]])
        velocities = np.array([[0.01, 0.0, 0.0], [-0.01, 0.0, 0.0]])
        masses = np.array([3.0, 1.0])

        resolve_pair(positions, velocities, masses, 0, 1, 0.08)

        dist = np.linalg.norm(positions[0] - positions[1])
        assert dist == pytest.approx(0.08)
        # Each particle moved half the penetration depth
        assert positions[0, 0] == pytest.approx(-0.01)
        assert positions[1, 0] == pytest.approx(0.07)


class TestResolveCollisions:
    """Tests for the all-pairs scan."""

    def test_only_overlapping_pairs_resolved(self):
        positions = np.array([
            [0.0, 0.0, 0.0],
            [0.07, 0.0, 0.0],
            [1.0, 1.0, 1.0],
        ])
        velocities = np.array([
            [0.02, 0.0, 0.0],
            [-0.02, 0.0, 0.0],
            [0.0, 0.01, 0.0],
        ])
        radii = np.array([0.05, 0.03, 0.03])
        masses = np.array([3.0, 1.0, 1.0])

        n_resolved = resolve_collisions(positions, velocities, radii, masses)

        assert n_resolved == 1
        assert np.array_equal(velocities[2], [0.0, 0.01, 0.0])

    def test_total_momentum_conserved(self):
        """Momentum of a dense random gas is conserved by the scan."""
        rng = np.random.default_rng(7)
        n = 60
        positions = rng.uniform(-0.3, 0.3, (n, 3))
        velocities = rng.uniform(-0.02, 0.02, (n, 3))
        radii = np.where(np.arange(n) < n // 2, 0.05, 0.03)
        masses = np.where(np.arange(n) < n // 2, 3.0, 1.0)

        p_before = calculate_momentum(velocities, masses)
        resolve_collisions(positions, velocities, radii, masses)

        assert np.allclose(calculate_momentum(velocities, masses), p_before, atol=1e-12)

    def test_deterministic(self):
        """Same input gives bit-identical output."""
        rng = np.random.default_rng(3)
        positions = rng.uniform(-0.2, 0.2, (30, 3))
        velocities = rng.uniform(-0.02, 0.02, (30, 3))
        radii = np.full(30, 0.05)
        masses = np.full(30, 1.0)

        p1, v1 = positions.copy(), velocities.copy()
        p2, v2 = positions.copy(), velocities.copy()
        resolve_collisions(p1, v1, radii, masses)
        resolve_collisions(p2, v2, radii, masses)

        assert np.array_equal(p1, p2)
        assert np.array_equal(v1, v2)

    def test_empty(self):
        assert resolve_collisions(np.zeros((0, 3)), np.zeros((0, 3)), np.zeros(0), np.zeros(0)) == 0


class TestIntegration:
    """Tests for position updates and gravity."""

    def test_free_flight(self):
        positions = np.zeros((1, 3))
        velocities = np.array([[0.01, -0.02, 0.03]])
        integrate_positions(positions, velocities, 2.0, 0.0)
        assert np.allclose(positions[0], [0.02, -0.04, 0.06])

    def test_gravity_semi_implicit(self):
        """Gravity changes vy before the position update."""
        positions = np.zeros((1, 3))
        velocities = np.zeros((1, 3))
        integrate_positions(positions, velocities, 1.0, 0.005)
        assert velocities[0, 1] == pytest.approx(-0.005)
        assert positions[0, 1] == pytest.approx(-0.005)


class TestBoundaries:
    """Tests for wall reflection and the aperture."""

    def test_reflect_and_clamp(self):
        positions = np.array([[1.49, 0.0, 0.0]])
        velocities = np.array([[0.03, 0.04, 0.0]])
        radii = np.array([0.05])
        masses = np.array([3.0])

        hits, impact, escaped = run_boundaries(positions, velocities, radii, masses)

        assert hits == 1
        assert impact == pytest.approx(0.05 * 3.0)
        assert not escaped[0]
        assert positions[0, 0] == pytest.approx(1.45)
        assert np.allclose(velocities[0], [-0.03, 0.04, 0.0])

    def test_corner_hits_two_walls(self):
        positions = np.array([[-1.6, 1.6, 0.0]])
        velocities = np.array([[-0.01, 0.01, 0.0]])
        radii = np.array([0.03])
        masses = np.array([1.0])

        hits, _, _ = run_boundaries(positions, velocities, radii, masses)

        assert hits == 2
        assert np.allclose(positions[0], [-1.47, 1.47, 0.0])
        assert np.allclose(velocities[0], [0.01, -0.01, 0.0])

    def test_inside_untouched(self):
        positions = np.array([[0.5, -0.5, 1.0]])
        velocities = np.array([[0.01, 0.01, 0.01]])
        hits, impact, _ = run_boundaries(
            positions, velocities, np.array([0.05]), np.array([3.0])
        )
        assert hits == 0
        assert impact == 0.0
        assert np.allclose(positions[0], [0.5, -0.5, 1.0])

    def test_escape_through_aperture(self):
        """Inside the aperture radius the particle escapes unmodified."""
        positions = np.array([[1.49, 0.3, -0.2]])
        velocities = np.array([[0.02, 0.0, 0.0]])
        aperture = ApertureConfig(enabled=True, radius=1.0)

        hits, impact, escaped = run_boundaries(
            positions, velocities, np.array([0.03]), np.array([1.0]), aperture=aperture
        )

        assert escaped[0]
        assert hits == 0
        assert impact == 0.0
        assert positions[0, 0] == pytest.approx(1.49)
        assert velocities[0, 0] == pytest.approx(0.02)

    def test_outside_aperture_radius_reflects(self):
        positions = np.array([[1.49, 1.2, 0.0]])
        velocities = np.array([[0.02, 0.0, 0.0]])
        aperture = ApertureConfig(enabled=True, radius=1.0)

        hits, _, escaped = run_boundaries(
            positions, velocities, np.array([0.03]), np.array([1.0]), aperture=aperture
        )

        assert not escaped[0]
        assert hits == 1
        assert velocities[0, 0] == pytest.approx(-0.02)

    def test_opposite_face_reflects(self):
        """Only the aperture face lets particles out."""
        positions = np.array([[-1.49, 0.0, 0.0]])
        velocities = np.array([[-0.02, 0.0, 0.0]])
        aperture = ApertureConfig(enabled=True, radius=1.0)

        hits, _, escaped = run_boundaries(
            positions, velocities, np.array([0.03]), np.array([1.0]), aperture=aperture
        )

        assert not escaped[0]
        assert hits == 1

    def test_aperture_on_negative_z_face(self):
        positions = np.array([[0.1, 0.1, -1.49]])
        velocities = np.array([[0.0, 0.0, -0.02]])
        aperture = ApertureConfig(enabled=True, radius=0.5, axis=2, sign=-1)

        _, _, escaped = run_boundaries(
            positions, velocities, np.array([0.03]), np.array([1.0]), aperture=aperture
        )

        assert escaped[0]

    def test_offset_aperture_center(self):
        """The in-plane offset is measured from the aperture center."""
        positions = np.array([[1.49, 0.0, 0.0]])
        velocities = np.array([[0.02, 0.0, 0.0]])
        aperture = ApertureConfig(enabled=True, radius=0.3, center=(0.8, 0.8))

        _, _, escaped = run_boundaries(
            positions, velocities, np.array([0.03]), np.array([1.0]), aperture=aperture
        )

        assert not escaped[0]


class TestPurgeAndClamp:
    """Tests for the purge mask and container resizing."""

    def test_find_purged(self):
        positions = np.array([
            [0.0, 0.0, 0.0],
            [2.1, 0.0, 0.0],
            [0.0, -2.05, 0.0],
            [1.4, 0.0, 0.0],
        ])
        escaped = np.array([False, False, False, True])

        mask = find_purged(positions, escaped, 1.5, 0.5)

        assert list(mask) == [False, True, True, True]

    def test_find_purged_empty(self):
        mask = find_purged(np.zeros((0, 3)), np.zeros(0, dtype=bool), 1.5, 0.5)
        assert mask.shape == (0,)

    def test_clamp_to_container(self):
        positions = np.array([[1.2, -1.3, 0.2], [0.1, 0.1, 0.1]])
        radii = np.array([0.05, 0.03])

        clamp_to_container(positions, radii, 1.0)

        assert np.allclose(positions[0], [0.95, -0.95, 0.2])
        assert np.allclose(positions[1], [0.1, 0.1, 0.1])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
