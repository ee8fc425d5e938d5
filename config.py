import os

# ======= Tile geometry / alphabet =======
TILE_SIZE = int(os.getenv("JG_TILE_SIZE", "10"))
MARKED    = os.getenv("JG_MARKED", "#")
UNMARKED  = os.getenv("JG_UNMARKED", ".")

# ======= Placement engine =======
# "backtrack" (default) or "cp_sat"
SOLVER = os.getenv("JG_SOLVER", "backtrack").strip().lower()

# ======= Backtracking guards =======
# 0 keeps the search unbounded; a positive value aborts after that many
# tentative placements.
BACKTRACK_NODE_LIMIT = int(os.getenv("JG_BACKTRACK_NODE_LIMIT", "0"))
PROGRESS_EVERY       = int(os.getenv("JG_PROGRESS_EVERY", "256"))
VERIFY_PLACEMENT     = int(os.getenv("JG_VERIFY_PLACEMENT", "1")) != 0

# ======= CP-SAT knobs =======
CP_SAT_SECONDS = float(os.getenv("JG_CP_SAT_SECONDS", "120"))
CP_SAT_WORKERS = int(os.getenv("JG_CP_SAT_WORKERS", "1"))
CP_SAT_ISOLATE = int(os.getenv("JG_CP_SAT_ISOLATE", "0")) != 0
MAX_MEMORY_MB  = int(os.getenv("JG_MAX_MEMORY_MB", "2048"))

# ======= Output names =======
PLACEMENT_OUT = os.getenv("JG_PLACEMENT_OUT", "placement.txt")
IMAGE_OUT     = os.getenv("JG_IMAGE_OUT", "image.txt")
IMAGE_HTML    = os.getenv("JG_IMAGE_HTML", "image_view.html")


class CFG:
    TILE_SIZE = TILE_SIZE
    MARKED    = MARKED
    UNMARKED  = UNMARKED

    SOLVER = SOLVER

    BACKTRACK_NODE_LIMIT = BACKTRACK_NODE_LIMIT
    PROGRESS_EVERY       = PROGRESS_EVERY
    VERIFY_PLACEMENT     = VERIFY_PLACEMENT

    CP_SAT_SECONDS = CP_SAT_SECONDS
    CP_SAT_WORKERS = CP_SAT_WORKERS
    CP_SAT_ISOLATE = CP_SAT_ISOLATE
    MAX_MEMORY_MB  = MAX_MEMORY_MB

    PLACEMENT_OUT = PLACEMENT_OUT
    IMAGE_OUT     = IMAGE_OUT
    IMAGE_HTML    = IMAGE_HTML


__all__ = ["CFG"]
