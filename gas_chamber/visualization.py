#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Plotting Module
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Module:         visualization.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================

Matplotlib plots for inspecting a run:
- Projection of the particles onto a plane of the container
- Speed and kinetic energy histograms per species
- Temperature and pressure history
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass

from .particles import SPECIES_ORDER, ParticleSnapshot, Species
from .thermodynamics import Histogram
from .physics import Container


SPECIES_COLORS = {
    Species.HEAVY: "#ffd300",
    Species.LIGHT: "#ff0000",
}


@dataclass
class VisualizationConfig:
    """Configuration for plots."""
    projection: Tuple[int, int] = (0, 1)   # axes shown (x, y)
    marker_scale: float = 4000.0           # marker area per unit radius²
    background_color: str = "#000000"
    wall_color: str = "white"
    aperture_color: str = "red"
    bar_alpha: float = 0.6
    figsize: Tuple[int, int] = (12, 10)


def render_particles_matplotlib(
    snapshot: ParticleSnapshot,
    container: Container,
    config: Optional[VisualizationConfig] = None,
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Render particles projected onto one face of the container.

    Args:
        snapshot: Particle snapshot
        container: Container (walls and aperture are outlined)
        config: Visualization configuration
        ax: Optional existing axes to draw on

    Returns:
        Matplotlib figure
    """
    if config is None:
        config = VisualizationConfig()

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 8))
    else:
        fig = ax.figure

    ax.clear()
    ax.set_facecolor(config.background_color)

    a, b = config.projection
    for species in SPECIES_ORDER:
        mask = snapshot.species_mask(species)
        if not np.any(mask):
            continue
        ax.scatter(
            snapshot.positions[mask, a], snapshot.positions[mask, b],
            s=config.marker_scale * snapshot.radii[mask] ** 2,
            c=SPECIES_COLORS[species],
            label=species.value,
            alpha=0.9,
        )

    h = container.half_extent
    ax.plot([-h, h, h, -h, -h], [-h, -h, h, h, -h],
            color=config.wall_color, linewidth=1.5, alpha=0.5)

    aperture = container.aperture
    if aperture.enabled and aperture.axis in (a, b):
        # The aperture face is seen edge-on in this projection
        wall = aperture.sign * h
        in_plane = {
            (aperture.axis + 1) % 3: aperture.center[0],
            (aperture.axis + 2) % 3: aperture.center[1],
        }
        other = b if aperture.axis == a else a
        lo = in_plane[other] - aperture.radius
        hi = in_plane[other] + aperture.radius
        if aperture.axis == a:
            ax.plot([wall, wall], [lo, hi], color=config.aperture_color, linewidth=3)
        else:
            ax.plot([lo, hi], [wall, wall], color=config.aperture_color, linewidth=3)

    margin = h * 0.05
    ax.set_xlim(-h - margin, h + margin)
    ax.set_ylim(-h - margin, h + margin)
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])

    return fig


def render_histogram(
    histogram: Histogram,
    ax: Optional[plt.Axes] = None,
    xlabel: Optional[str] = None,
    config: Optional[VisualizationConfig] = None
) -> plt.Figure:
    """
    Draw overlaid per-species bar charts of a histogram.

    Args:
        histogram: Histogram from HistogramBinner
        ax: Optional existing axes
        xlabel: Axis label (default: the histogram property)
        config: Visualization configuration

    Returns:
        Matplotlib figure
    """
    if config is None:
        config = VisualizationConfig()

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 4))
    else:
        fig = ax.figure

    ax.clear()
    for species in SPECIES_ORDER:
        counts = histogram.counts.get(species)
        if counts is None or counts.sum() == 0:
            continue
        ax.bar(
            histogram.bin_edges, counts,
            width=histogram.bin_width * 0.9,
            align='edge',
            color=SPECIES_COLORS[species],
            alpha=config.bar_alpha,
            label=species.value,
        )

    ax.set_xlim(0, histogram.max_value)
    ax.set_xlabel(xlabel or histogram.prop.replace("_", " ").title())
    ax.set_ylabel('Particles')
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)

    return fig


def render_history(
    times: List[float],
    temperatures: List[float],
    pressures_atm: List[float],
    max_pressure_atm: Optional[float] = None,
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Plot temperature and pressure against simulated time on twin axes.
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 4))
    else:
        fig = ax.figure

    ax.clear()
    ax.plot(times, temperatures, 'r-', linewidth=1.5)
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Temperature (K)', color='r')
    ax.grid(True, alpha=0.3)

    ax_p = ax.twinx()
    ax_p.plot(times, pressures_atm, 'b-', linewidth=1.5)
    if max_pressure_atm is not None:
        ax_p.axhline(y=max_pressure_atm, color='blue', linestyle='--', alpha=0.5)
    ax_p.set_ylabel('Pressure (atm)', color='b')

    return fig


def render_dashboard(
    snapshot: ParticleSnapshot,
    container: Container,
    speed_histogram: Histogram,
    energy_histogram: Histogram,
    history: Dict[str, List[float]],
    max_pressure_atm: Optional[float] = None,
    config: Optional[VisualizationConfig] = None
) -> plt.Figure:
    """
    Render particles, both distributions and the run history in one figure.

    Args:
        snapshot: Final particle snapshot
        container: Container geometry
        speed_histogram: Speed distribution
        energy_histogram: Kinetic energy distribution
        history: Dict with 'time', 'temperature', 'pressure' lists
        max_pressure_atm: Optional explosion limit drawn on the pressure axis
        config: Visualization configuration

    Returns:
        Matplotlib figure
    """
    if config is None:
        config = VisualizationConfig()

    fig = plt.figure(figsize=config.figsize)

    ax_particles = fig.add_subplot(2, 2, 1)
    render_particles_matplotlib(snapshot, container, config, ax=ax_particles)
    ax_particles.set_title('Particles (x-y projection)')

    ax_history = fig.add_subplot(2, 2, 2)
    if len(history.get('time', [])) > 0:
        render_history(
            history['time'], history['temperature'], history['pressure'],
            max_pressure_atm, ax=ax_history
        )
    ax_history.set_title('Temperature and Pressure')

    ax_speed = fig.add_subplot(2, 2, 3)
    render_histogram(speed_histogram, ax=ax_speed, xlabel='Speed', config=config)
    ax_speed.set_title('Speed Distribution')

    ax_energy = fig.add_subplot(2, 2, 4)
    render_histogram(energy_histogram, ax=ax_energy, xlabel='Kinetic Energy', config=config)
    ax_energy.set_title('Kinetic Energy Distribution')

    plt.tight_layout()

    return fig
