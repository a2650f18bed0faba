# utils.py
"""
Utility functions for the black hole renderer.

This module provides helper functions, such as logging setup and
configuration loading/validation, that are used across different parts
of the application but do not belong to a specific domain like the
star physics or rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

import constants

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# validate_simulation_params(params: Dict[str, Any]) -> Dict[str, Any]:
#   - Inputs: the "simulation_parameters" section of config.json (may be partial).
#   - Outputs: a new dictionary with every recognized option filled in.
#   - Side Effects: None.
#   - Invariants: 0 < horizon_radius <= orbit_radius_min < orbit_radius_max,
#     0 < smoothing_factor <= 1, particle_count >= 0. Violations raise ValueError.


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/blackhole.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise


def _reject(msg: str) -> None:
    msg = f"Configuration error: {msg}"
    logging.critical(msg)
    raise ValueError(msg)


def validate_simulation_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fills in defaults for the field parameters and rejects malformed values.

    Args:
        params (Dict[str, Any]): The "simulation_parameters" config section.

    Returns:
        Dict[str, Any]: A complete copy of the parameters.

    Raises:
        ValueError: If any value would produce a degenerate field.
    """
    horizon = float(params.get('horizon_radius', constants.HORIZON_RADIUS))
    resolved = {
        'seed': params.get('seed'),
        'particle_count': params.get('particle_count', constants.PARTICLE_COUNT),
        'horizon_radius': horizon,
        'orbit_radius_min': float(params.get('orbit_radius_min', horizon)),
        'orbit_radius_max': float(params.get('orbit_radius_max', constants.ORBIT_RADIUS_MAX)),
        'smoothing_factor': float(params.get('smoothing_factor', constants.SMOOTHING_FACTOR)),
        'speed_min': float(params.get('speed_min', constants.SPEED_MIN)),
        'speed_max': float(params.get('speed_max', constants.SPEED_MAX)),
        'collapse_threshold': float(params.get('collapse_threshold', constants.COLLAPSE_THRESHOLD)),
        'collapsed_spin_factor': float(params.get('collapsed_spin_factor', constants.COLLAPSED_SPIN_FACTOR)),
        'expanded_spin_factor': float(params.get('expanded_spin_factor', constants.EXPANDED_SPIN_FACTOR)),
        'expansion_rows': params.get('expansion_rows', constants.EXPANSION_ROWS),
        'expansion_row_spacing': float(params.get('expansion_row_spacing', constants.EXPANSION_ROW_SPACING)),
        'star_color': tuple(params.get('star_color', constants.STAR_COLOR)),
    }

    count = resolved['particle_count']
    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        _reject(f"particle_count must be a non-negative integer, got {count!r}.")
    if resolved['horizon_radius'] <= 0:
        _reject(f"horizon_radius must be positive, got {resolved['horizon_radius']}.")
    if resolved['orbit_radius_min'] < resolved['horizon_radius']:
        _reject(
            f"orbit_radius_min ({resolved['orbit_radius_min']}) must not be inside "
            f"the horizon ({resolved['horizon_radius']})."
        )
    if resolved['orbit_radius_max'] <= resolved['orbit_radius_min']:
        _reject(
            f"orbit_radius_max ({resolved['orbit_radius_max']}) must exceed "
            f"orbit_radius_min ({resolved['orbit_radius_min']})."
        )
    if not 0.0 < resolved['smoothing_factor'] <= 1.0:
        _reject(f"smoothing_factor must be in (0, 1], got {resolved['smoothing_factor']}.")
    if resolved['speed_min'] < 0 or resolved['speed_max'] < resolved['speed_min']:
        _reject(
            f"speed range [{resolved['speed_min']}, {resolved['speed_max']}] is invalid; "
            f"expected 0 <= speed_min <= speed_max."
        )
    if not 0.0 < resolved['collapse_threshold'] <= 1.0:
        _reject(f"collapse_threshold must be in (0, 1], got {resolved['collapse_threshold']}.")
    if resolved['collapsed_spin_factor'] <= 0 or resolved['expanded_spin_factor'] <= 0:
        _reject("spin factors must be positive.")
    rows = resolved['expansion_rows']
    if not isinstance(rows, int) or isinstance(rows, bool) or rows < 1:
        _reject(f"expansion_rows must be a positive integer, got {rows!r}.")
    if resolved['expansion_row_spacing'] < 0:
        _reject(f"expansion_row_spacing must not be negative, got {resolved['expansion_row_spacing']}.")
    if len(resolved['star_color']) != 3:
        _reject(f"star_color must be an RGB triple, got {resolved['star_color']!r}.")

    return resolved


def validate_visualization_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Fills in defaults for the render loop and surface options."""
    resolved = {
        'target_frame_rate': float(params.get('target_frame_rate', constants.FPS)),
        'trail_alpha': float(params.get('trail_alpha', constants.TRAIL_ALPHA)),
        'dpi': float(params.get('dpi', constants.DEFAULT_DPI)),
        'window_width': int(params.get('window_width', constants.WINDOW_WIDTH)),
        'window_height': int(params.get('window_height', constants.WINDOW_HEIGHT)),
        'background_color': tuple(params.get('background_color', constants.BACKGROUND_COLOR)),
        'center_label': params.get('center_label', constants.CENTER_LABEL),
        'hover_radius': params.get('hover_radius'),
    }

    if resolved['target_frame_rate'] <= 0:
        _reject(f"target_frame_rate must be positive, got {resolved['target_frame_rate']}.")
    if not 0.0 <= resolved['trail_alpha'] <= 1.0:
        _reject(f"trail_alpha must be in [0, 1], got {resolved['trail_alpha']}.")
    if resolved['dpi'] <= 0:
        _reject(f"dpi must be positive, got {resolved['dpi']}.")
    if len(resolved['background_color']) != 3:
        _reject(f"background_color must be an RGB triple, got {resolved['background_color']!r}.")
    if resolved['hover_radius'] is not None:
        resolved['hover_radius'] = float(resolved['hover_radius'])
        if resolved['hover_radius'] <= 0:
            _reject(f"hover_radius must be positive, got {resolved['hover_radius']}.")

    return resolved
