"""
Centralized constants for Farm Helper.

All fixed game values used by the worker engine live here. Values the host may
tune (costs, stamina rates, schedule) are DEFAULTS for config.Config and can be
overridden from settings.yaml.
"""

# =============================================================================
# TIMING
# =============================================================================
TICKS_PER_STEP = 60            # One worker step per second
NO_WORK_NOTICE_TICKS = 300     # "No work" notice at most every 5 seconds
DAY_START_TIME = 600           # 6:00 AM
END_OF_DAY_TIME = 1800         # Workers go home at 6:00 PM
TICKS_PER_TIME_STEP = 420      # 10 in-game minutes every 7 seconds

# =============================================================================
# MOVEMENT
# =============================================================================
PROXIMITY_RADIUS = 1.5         # Tiles; a worker within this radius acts instead of moving
FALLBACK_SPAWN_TILE = (64, 15)  # Farmhouse door, used when the player is off the farm
SPAWN_OFFSET = (1, 0)          # Spawn one tile east of the player

# Facing directions (game convention)
FACE_UP = 0
FACE_RIGHT = 1
FACE_DOWN = 2
FACE_LEFT = 3

WALK_FRAMES = [(0, 100), (1, 100)]         # (frame, duration_ms)
WORK_FRAMES = [(166, 100), (167, 100)]

# =============================================================================
# TREES
# =============================================================================
CHOPPABLE_GROWTH_STAGE = 5     # Trees at or past this stage are mature
TREE_HEALTH = 10.0
STUMP_HEALTH = 10.0
CHOP_DAMAGE = 2.0
WOOD_ITEM_ID = "(O)388"
STUMP_WOOD_COUNT = 12          # Wood dropped when a tree falls to a stump
CLEARED_STUMP_WOOD_COUNT = 1

# =============================================================================
# SOIL
# =============================================================================
SOIL_DRY = 0
SOIL_WATERED = 1

# =============================================================================
# STAMINA (defaults)
# =============================================================================
REST_THRESHOLD = 0.1           # Fraction of the worker's own max stamina
RECOVERY_PER_STEP = 5.0
ACTION_COST = 2.0

# =============================================================================
# HIRING COSTS (defaults)
# =============================================================================
BASE_HIRING_COST = 100
TASK_COSTS = {
    "weeds": 30,
    "stone": 50,
    "wood": 100,
    "watering": 150,
    "collect": 0,
}
DISCOUNT_PER_HEART = 0.05      # 5% off per heart
MAX_DISCOUNT = 0.8

# =============================================================================
# SOUND CUES
# =============================================================================
SOUND_WATERING = "wateringCan"
SOUND_HAMMER = "hammer"
SOUND_CUT = "cut"
SOUND_AXE_CHOP = "axchop"
SOUND_TREE_CRACK = "treecrack"
SOUND_STUMP_CRACK = "stumpCrack"
SOUND_HARVEST = "harvest"
SOUND_PICKUP = "coin"
