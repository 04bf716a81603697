"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.

Unit System
-----------
All gameplay distances are measured in **pixels** of the virtual
render surface, where:

    1 tile = 32 px   (``TILE_SIZE``)

Standard units used throughout the codebase:

    Distance / position     px
    Speed / momentum        px/s
    Time                    s       (seconds, real time)
    Health                  HP      (whole hearts)
    Counts                  —       (unitless)

A room is ``ROOM_COLS`` × ``ROOM_ROWS`` tiles.  The viewport is smaller
than the room so the camera has something to do.

Tuning numbers (speeds, timers, thresholds) live in
``data/tuning.toml``.  Only structural constants that the code depends
on live here.
"""

# ── Tile IDs ────────────────────────────────────────────────────────
# 0 and anything >= 2 is floor for collision purposes.
TILE_FLOOR = 0
TILE_WALL  = 1
TILE_TREE  = 2      # forest decoration
TILE_DUNE  = 3      # desert decoration

# ── Room geometry ───────────────────────────────────────────────────
TILE_SIZE = 32
ROOM_COLS = 16
ROOM_ROWS = 11

# Interior rectangle that is always floor (rows 4-6, cols 6-9 inclusive).
SAFE_ROWS = (4, 6)
SAFE_COLS = (6, 9)

# Doorway cells carved at the midpoint of each edge: (col, row).
DOORWAYS = (
    (ROOM_COLS // 2, 0),                # top
    (ROOM_COLS // 2, ROOM_ROWS - 1),    # bottom
    (0, ROOM_ROWS // 2),                # left
    (ROOM_COLS - 1, ROOM_ROWS // 2),    # right
)

# The cell just inside each doorway, in DOORWAYS order.  Kept floor so
# every doorway can be walked through; arrivals from the next room land
# here.
DOOR_LANDINGS = tuple(
    (min(max(c, 1), ROOM_COLS - 2), min(max(r, 1), ROOM_ROWS - 2))
    for c, r in DOORWAYS
)

# ── Viewport ────────────────────────────────────────────────────────
VIEW_W = 384
VIEW_H = 288
HUD_H = 32           # HUD strip drawn over the top of the viewport
WINDOW_SCALE = 2

# ── Directions ──────────────────────────────────────────────────────
# Index order matches ``components.spatial.Direction``.
DIR_DX = (0, 1, 0, -1)
DIR_DY = (-1, 0, 1, 0)

# Diagonal normalisation (1 / sqrt(2)).
DIAGONAL = 0.7071

# Upper bound on a single frame's dt (seconds).
MAX_DT = 0.016
