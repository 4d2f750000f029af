#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Hard-Sphere Collision and Boundary Physics
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Module:         physics.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================

This module implements the microscopic physics of the gas chamber:
elastic hard-sphere collisions between particles, reflection at the walls of
a cubic container, and effusion through an optional circular aperture.

For two colliding spheres with unit normal n (from particle 2 to particle 1)
and relative velocity v_rel = v1 - v2, the elastic impulse is:

    J = 2 (v_rel · n) / (m1 + m2)
    v1' = v1 - J m2 n
    v2' = v2 + J m1 n

which conserves both momentum and kinetic energy of the pair.

All hot loops are compiled with Numba and work on plain NumPy arrays.
"""

import numpy as np
from numba import jit
from typing import Tuple
from dataclasses import dataclass, field


# Below this separation the collision normal is undefined
COINCIDENT_DISTANCE = 1e-12


@dataclass
class ApertureConfig:
    """
    Circular opening in one face of the container.

    The face is selected by ``axis`` (0=x, 1=y, 2=z) and ``sign`` (+1 or -1).
    ``center`` is the in-plane offset of the hole along the two remaining
    axes, in cyclic order (for the x face: (y, z)).
    """
    enabled: bool = False
    radius: float = 1.0
    center: Tuple[float, float] = (0.0, 0.0)
    axis: int = 0
    sign: int = 1

    def __post_init__(self):
        if self.axis not in (0, 1, 2):
            raise ValueError(f"aperture axis must be 0, 1 or 2, got {self.axis}")
        if self.sign not in (-1, 1):
            raise ValueError(f"aperture sign must be +1 or -1, got {self.sign}")
        if self.radius < 0:
            raise ValueError(f"aperture radius must be non-negative, got {self.radius}")


@dataclass
class Container:
    """Axis-aligned cube centered on the origin."""
    half_extent: float = 1.5
    aperture: ApertureConfig = field(default_factory=ApertureConfig)

    def __post_init__(self):
        if self.half_extent <= 0:
            raise ValueError(f"half_extent must be positive, got {self.half_extent}")

    @property
    def edge_length(self) -> float:
        return 2.0 * self.half_extent


@jit(nopython=True, cache=True)
def resolve_pair(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    i: int,
    j: int,
    min_distance: float
) -> bool:
    """
    Resolve an elastic collision between particles i and j in place.

    Args:
        positions: Nx3 array of positions
        velocities: Nx3 array of velocities
        masses: Array of mass multipliers
        i, j: Particle indices
        min_distance: Contact distance (sum of radii)

    Returns:
        True if an impulse was applied, False if the pair was separating
    """
    dx = positions[i, 0] - positions[j, 0]
    dy = positions[i, 1] - positions[j, 1]
    dz = positions[i, 2] - positions[j, 2]
    dist = np.sqrt(dx * dx + dy * dy + dz * dz)

    if dist < COINCIDENT_DISTANCE:
        # Fixed fallback axis
        nx, ny, nz = 1.0, 0.0, 0.0
    else:
        nx = dx / dist
        ny = dy / dist
        nz = dz / dist

    rvx = velocities[i, 0] - velocities[j, 0]
    rvy = velocities[i, 1] - velocities[j, 1]
    rvz = velocities[i, 2] - velocities[j, 2]
    v_normal = rvx * nx + rvy * ny + rvz * nz

    # Already separating
    if v_normal >= 0.0:
        return False

    m1 = masses[i]
    m2 = masses[j]
    impulse = 2.0 * v_normal / (m1 + m2)

    velocities[i, 0] -= impulse * m2 * nx
    velocities[i, 1] -= impulse * m2 * ny
    velocities[i, 2] -= impulse * m2 * nz
    velocities[j, 0] += impulse * m1 * nx
    velocities[j, 1] += impulse * m1 * ny
    velocities[j, 2] += impulse * m1 * nz

    # Split the penetration depth between both spheres
    overlap = min_distance - dist
    if overlap > 0.0:
        half = 0.5 * overlap
        positions[i, 0] += half * nx
        positions[i, 1] += half * ny
        positions[i, 2] += half * nz
        positions[j, 0] -= half * nx
        positions[j, 1] -= half * ny
        positions[j, 2] -= half * nz

    return True


@jit(nopython=True, cache=True)
def resolve_collisions(
    positions: np.ndarray,
    velocities: np.ndarray,
    radii: np.ndarray,
    masses: np.ndarray
) -> int:
    """
    Scan every pair (i < j) and resolve overlapping, approaching pairs.

    Direct O(N²) scan in fixed index order, so the result is deterministic
    for a given particle ordering.

    Returns:
        Number of resolved collisions
    """
    n_particles = positions.shape[0]
    n_resolved = 0

    for i in range(n_particles):
        for j in range(i + 1, n_particles):
            min_distance = radii[i] + radii[j]

            dx = positions[i, 0] - positions[j, 0]
            dy = positions[i, 1] - positions[j, 1]
            dz = positions[i, 2] - positions[j, 2]
            dist_sq = dx * dx + dy * dy + dz * dz

            if dist_sq < min_distance * min_distance:
                if resolve_pair(positions, velocities, masses, i, j, min_distance):
                    n_resolved += 1

    return n_resolved


@jit(nopython=True, cache=True)
def integrate_positions(
    positions: np.ndarray,
    velocities: np.ndarray,
    time_scale: float,
    gravity_accel: float
) -> None:
    """
    Semi-implicit Euler step: gravity updates vertical velocity first,
    then positions advance with the updated velocity.
    """
    n_particles = positions.shape[0]
    for i in range(n_particles):
        velocities[i, 1] -= gravity_accel * time_scale
        positions[i, 0] += velocities[i, 0] * time_scale
        positions[i, 1] += velocities[i, 1] * time_scale
        positions[i, 2] += velocities[i, 2] * time_scale


@jit(nopython=True, cache=True)
def handle_boundaries(
    positions: np.ndarray,
    velocities: np.ndarray,
    radii: np.ndarray,
    masses: np.ndarray,
    half_extent: float,
    escaped: np.ndarray,
    aperture_enabled: bool,
    aperture_axis: int,
    aperture_sign: int,
    aperture_u: float,
    aperture_v: float,
    aperture_radius: float
) -> Tuple[int, float]:
    """
    Reflect particles off the container walls, or let them escape.

    A particle past the aperture face whose in-plane offset lies inside the
    aperture radius is flagged in ``escaped`` and left untouched. Every other
    coordinate beyond ``half_extent - radius`` has its velocity component
    negated and is clamped to the wall.

    Args:
        positions: Nx3 array of positions
        velocities: Nx3 array of velocities
        radii: Particle radii
        masses: Mass multipliers
        half_extent: Container half edge length
        escaped: Boolean output array, set True for escaping particles
        aperture_enabled: Whether the aperture is open
        aperture_axis: Axis normal to the aperture face
        aperture_sign: +1 for the positive face, -1 for the negative one
        aperture_u, aperture_v: In-plane aperture center
        aperture_radius: Aperture radius

    Returns:
        (wall_hits, total_impact): count of reflections and the summed
        speed × mass of the reflected particles
    """
    n_particles = positions.shape[0]
    wall_hits = 0
    total_impact = 0.0
    radius_sq = aperture_radius * aperture_radius

    for i in range(n_particles):
        limit = half_extent - radii[i]

        if aperture_enabled and positions[i, aperture_axis] * aperture_sign > limit:
            du = positions[i, (aperture_axis + 1) % 3] - aperture_u
            dv = positions[i, (aperture_axis + 2) % 3] - aperture_v
            if du * du + dv * dv < radius_sq:
                escaped[i] = True
                continue

        speed = np.sqrt(
            velocities[i, 0] * velocities[i, 0]
            + velocities[i, 1] * velocities[i, 1]
            + velocities[i, 2] * velocities[i, 2]
        )
        impact = speed * masses[i]

        for axis in range(3):
            if positions[i, axis] > limit:
                velocities[i, axis] = -velocities[i, axis]
                positions[i, axis] = limit
                wall_hits += 1
                total_impact += impact
            elif positions[i, axis] < -limit:
                velocities[i, axis] = -velocities[i, axis]
                positions[i, axis] = -limit
                wall_hits += 1
                total_impact += impact

    return wall_hits, total_impact


def find_purged(
    positions: np.ndarray,
    escaped: np.ndarray,
    half_extent: float,
    escape_margin: float
) -> np.ndarray:
    """
    Select particles to remove from the pool.

    A particle is purged when it escaped through the aperture, or when any
    coordinate lies beyond ``half_extent + escape_margin`` (only possible
    while wall reflection is suppressed).

    Returns:
        Boolean mask over particles
    """
    if positions.shape[0] == 0:
        return np.zeros(0, dtype=bool)
    outside = np.any(np.abs(positions) > half_extent + escape_margin, axis=1)
    return escaped | outside


def clamp_to_container(
    positions: np.ndarray,
    radii: np.ndarray,
    half_extent: float
) -> np.ndarray:
    """
    Clamp positions in place so every particle fits inside the container.

    Used after the container is resized.
    """
    limits = np.maximum(half_extent - radii, 0.0)[:, np.newaxis]
    np.clip(positions, -limits, limits, out=positions)
    return positions


def calculate_kinetic_energy(velocities: np.ndarray, masses: np.ndarray) -> float:
    """
    Calculate total kinetic energy.

    KE = Σ (1/2) m v²
    """
    v_sq = np.sum(velocities ** 2, axis=1)
    return 0.5 * float(np.sum(masses * v_sq))


def calculate_momentum(velocities: np.ndarray, masses: np.ndarray) -> np.ndarray:
    """Total momentum vector Σ m v."""
    return np.sum(masses[:, np.newaxis] * velocities, axis=0)
