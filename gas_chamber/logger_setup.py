#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Logging Configuration
================================================================================

Project:        Week 2 Project 1: Kinetic Gas Chamber
Module:         logger_setup.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        January 29, 2026
Last Updated:   January 29, 2026

License:        MIT License
================================================================================
"""

import logging
import os
from datetime import datetime
from typing import Optional

LOGGER_NAME = "gas_chamber"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    run_id: Optional[str] = None,
    fmt: str = DEFAULT_FORMAT
) -> logging.Logger:
    """
    Configure the dedicated application logger.

    The "gas_chamber" logger (not the root logger) writes to the console
    and, when ``log_dir`` is given, to ``<log_dir>/<run_id>/simulation.log``.
    Keeping it off the root logger avoids capturing Numba's compiler logs.

    Args:
        level: Logging level name
        log_dir: Directory for run logs; None disables the file handler
        run_id: Name of the run subdirectory (default: current timestamp)
        fmt: Log record format

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(fmt)

    # Clear existing handlers to avoid duplication if called again
    if logger.hasHandlers():
        logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_dir is not None:
        run_id = run_id or datetime.now().strftime("%Y%m%d-%H%M%S")
        run_dir = os.path.join(log_dir, run_id)
        os.makedirs(run_dir, exist_ok=True)
        log_file = os.path.join(run_dir, "simulation.log")

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")

    return logger
