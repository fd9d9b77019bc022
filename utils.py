# utils.py
"""
Utility functions for the credit field application.

This module provides helpers that are used across components but do not
belong to a specific domain like particle physics or rendering: logging
setup, config loading, coordinate mapping between the window and a
canvas, and linear range mapping.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional, Sequence, Tuple

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys. All sub-keys are optional.
#   - Side Effects: Configures the root Python logger with a console handler
#     and a rotating file handler. Creates the log directory if needed.
#
# to_canvas_coords(pos, display_rect, canvas_size) -> Optional[Tuple[float, float]]:
#   - Inputs:
#     - pos: (x, y) in device (window) coordinates.
#     - display_rect: (left, top, width, height) where the canvas is shown.
#     - canvas_size: (width, height) of the canvas buffer in pixels.
#   - Outputs: (x, y) in canvas pixel space, or None when the display rect
#     has no area.
#   - Invariants: A point at the display rect's top-left maps to (0, 0); a
#     point at its bottom-right maps to canvas_size.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes the root logger to the console and to a rotating log file,
    using the "logging" section of the config.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    formatter = logging.Formatter(
        log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    )
    log_file_path = log_config.get('log_file', 'logs/credit_field.log')

    if os.path.dirname(log_file_path):
        os.makedirs(os.path.dirname(log_file_path), exist_ok=True)

    root = logging.getLogger()
    root.setLevel(log_level)
    # Re-running setup replaces the handlers instead of stacking them.
    root.handlers.clear()

    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info(f"Logging to console and {log_file_path} at {log_level}.")

def load_config(path: str) -> Dict[str, Any]:
    """Reads the JSON config; a missing or malformed file is logged and re-raised."""
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"No config file at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Config file {path} is not valid JSON: {e}")
        raise
    logging.info(f"Loaded config from {path} (sections: {', '.join(config)}).")
    return config

def to_canvas_coords(
    pos: Sequence[float],
    display_rect: Sequence[float],
    canvas_size: Sequence[float],
) -> Optional[Tuple[float, float]]:
    """
    Maps a device-space point into canvas pixel space.

    Handles canvases whose buffer size differs from the area they are shown
    in (high-density displays, scaled windows).
    """
    left, top, rect_w, rect_h = display_rect
    if rect_w <= 0 or rect_h <= 0:
        return None
    scale_x = canvas_size[0] / rect_w
    scale_y = canvas_size[1] / rect_h
    return ((pos[0] - left) * scale_x, (pos[1] - top) * scale_y)

def map_range(value: float, start1: float, stop1: float, start2: float, stop2: float) -> float:
    """Re-maps a value from one range to another, without clamping."""
    if stop1 == start1:
        return start2
    return start2 + (value - start1) * (stop2 - start2) / (stop1 - start1)
