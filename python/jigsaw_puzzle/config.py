"""Game-wide constants.

Nothing here is runtime-configurable: the game ships one puzzle with one
fixed grid shape.
"""

from __future__ import annotations

from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent
# shipped as package data so installed copies find it too
ASSETS_DIR = PACKAGE_ROOT / "assets"
DEFAULT_IMAGE = ASSETS_DIR / "images" / "puzzle.ppm"

# -- grid ---------------------------------------------------------------------

ROWS = 3
COLUMNS = 4

# -- placement ----------------------------------------------------------------

# A drop is accepted when more than this share of the piece covers its cell.
PLACEMENT_THRESHOLD = 0.4

# -- pile ---------------------------------------------------------------------

PILE_GAP = 10.0
PILE_TOP_MARGIN = 30.0

# Pieces start here until the pile has been laid out for the first time.
OFFSCREEN = (-1000.0, -1000.0)

# Front ends wait this long after a geometry change before flushing the
# pending pile relayout.
RELAYOUT_DELAY_MS = 300
