#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Kinetic Gas Chamber
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Description:    Two-species hard-sphere gas in a cubic container, with
                temperature control, ideal-gas pressure and effusion

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================

This package implements a kinetic-theory gas simulation featuring:
- Elastic, momentum-conserving collisions between two particle species
- Wall reflection and effusion through a circular aperture
- Temperature control via a global speed multiplier
- Ideal-gas pressure with a latched over-pressure condition
- Speed and kinetic energy distributions per species

Modules:
    - particles: Species definitions and the particle pool
    - physics: Numba collision, integration and boundary kernels
    - thermodynamics: Temperature control, pressure and histograms
    - simulation: Tick-driven engine with commands, pause and sub-steps
    - visualization: Matplotlib plots of particles and distributions
    - logger_setup: Application logger configuration
"""

__version__ = "1.0.0"
__author__ = "Ryan Kamp"
