"""
Configuration & Constants
=========================
This module serves as the central registry for file paths and the tunable
constants of the board.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers scattered
   throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (data.json, page images) when the app is frozen into an .exe.
3. Synchronization: Motion durations live here only, so the view's animations
   and the controllers' cleanup timers can never drift apart.

Exports:
    DATA_PATH (str): Absolute path to the bundled document list.
    CACHE_PATH (str): Absolute path to the local document cache.
"""
import sys
import os
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/spatialdocs/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
DATA_PATH: str = get_resource_path("data.json")
CACHE_PATH: str = os.path.join(str(Path.home()), ".spatialdocs", "documents.json")

# --- Tile geometry ---
ICON_WIDTH: float = 80.0  # px, width of a tile shown as an icon at the edges
MAX_SCALE: float = 2.0  # scale at the vertical center of the viewport
DEFAULT_TILE_WIDTH: float = 200.0
DEFAULT_TILE_HEIGHT: float = 280.0
MAX_TILE_HEIGHT: float = 900.0  # records taller than this are scaled down on load

# --- Stacking ---
Z_PER_SCALE: int = 1000
DRAG_Z: int = 1_000_000  # above any scale-derived z value

# --- Motion (ms) ---
TRANSITION_MS: int = 500
FRAME_MS: int = 16
RESIZE_DEBOUNCE_MS: int = 100

# --- Viewer overlay ---
VIEWER_PAGE_WIDTH: float = 800.0
VIEWER_SIDE_MARGIN: float = 40.0
VIEWER_TOP_MARGIN: float = 60.0
VIEWER_PAGE_SPACING: float = 24.0
ZOOM_MIN: float = 0.5
ZOOM_MAX: float = 3.0
ZOOM_STEP: float = 0.1

# --- Action targets ---
ACTION_ZONE_FRACTION: float = 0.75  # tray opens right of this share of the width
ACTION_DROP_SCALE: float = 0.5
ACTION_BAND_X_FRACTION: float = 0.5  # horizontal band a dropped tile moves to
ACTION_TARGET_WIDTH: float = 160.0
ACTION_TARGET_HEIGHT: float = 96.0
ACTION_TARGET_SPACING: float = 16.0

# --- Library panel ---
LIBRARY_PANEL_WIDTH: float = 260.0
