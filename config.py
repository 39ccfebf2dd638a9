"""Centralised configuration constants for the café simulator."""
from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths
# ---------------------------------------------------------------------------
CUSTOMERS_FILE: Path = Path("data/customers.json")
RECIPES_FILE: Path = Path("data/recipes.json")

# ---------------------------------------------------------------------------
# Drink and topping kinds
# ---------------------------------------------------------------------------
COFFEE: str = "coffee"
HOT_CHOCOLATE: str = "hot-chocolate"
MOCHA: str = "mocha"

WHIPPED_CREAM: str = "whipped-cream"
MARSHMALLOWS: str = "marshmallows"
SPRINKLES: str = "sprinkles"

DRINK_KINDS: tuple[str, ...] = (COFFEE, HOT_CHOCOLATE, MOCHA)
BASE_KINDS: tuple[str, ...] = (COFFEE, HOT_CHOCOLATE)
EXTRA_KINDS: tuple[str, ...] = (WHIPPED_CREAM, MARSHMALLOWS, SPRINKLES)

# Items a player can drop onto a target; the payload names the item itself.
DROP_CUP: str = "cup"
DROP_MARSHMALLOW_SCOOP: str = "marshmallow-scoop"
DROP_SPRINKLES: str = "sprinkles"
DROP_CUP_TO_TRASH: str = "cup-to-trash"

# ---------------------------------------------------------------------------
# Cup fill rules (levels on a 0–100 scale)
# ---------------------------------------------------------------------------
FULL_CUP_LEVEL: float = 100.0
MOCHA_SPLIT_CAP: float = 50.0          # per-base cap once the other base has liquid

# ---------------------------------------------------------------------------
# Coffee brewer
# ---------------------------------------------------------------------------
BREW_INTERVAL: float = 0.5             # seconds between brew ticks
BREW_STEP: float = 10.0                # coffee level added per brew tick
BEAN_REFILL_THRESHOLD: int = 3         # coffee drinks before the hopper is empty

# ---------------------------------------------------------------------------
# Kettle / stove
# ---------------------------------------------------------------------------
HEAT_INTERVAL: float = 0.5             # seconds between heating ticks
HEAT_STEP: float = 20.0                # degrees gained per heating tick
MAX_TEMPERATURE: float = 200.0
HOT_TEMPERATURE: float = 160.0         # kettle is pourable from here
COOL_INTERVAL: float = 1.0             # seconds between cooling ticks
COOL_STEP: float = 10.0                # degrees lost per cooling tick
FIRE_DELAY: float = 3.0                # seconds at max temperature before fire
POUR_INTERVAL: float = 0.2             # seconds between pour ticks
POUR_STEP: float = 10.0                # milk level added per pour tick

# ---------------------------------------------------------------------------
# Chocolate / stirring
# ---------------------------------------------------------------------------
STIR_INTERVAL: float = 1.0
STIR_REQUIRED_SECONDS: float = 3.0     # minimum stir to finish a hot chocolate

# ---------------------------------------------------------------------------
# Toppings
# ---------------------------------------------------------------------------
WHIPPED_CREAM_INTERVAL: float = 0.1
WHIPPED_CREAM_HOLD_SECONDS: float = 2.0
SPRINKLE_SHAKES_REQUIRED: int = 3
SPRINKLE_SHAKE_COOLDOWN: float = 0.3   # visual only, never blocks a shake

# ---------------------------------------------------------------------------
# Scoring weights and bands
# ---------------------------------------------------------------------------
COFFEE_WEIGHT: int = 30
TEMPERATURE_WEIGHT: int = 30
MILK_WEIGHT: int = 20
STIRRING_WEIGHT: int = 20
MOCHA_RATIO_WEIGHT: int = 20
TOPPINGS_WEIGHT: int = 30
OVERFLOW_PENALTY: int = 20

# (lower bound inclusive, points) checked top-down; below the last bound scores
# the fallback points.
COFFEE_LEVEL_BANDS: tuple[tuple[float, int], ...] = ((90.0, 30), (80.0, 25), (70.0, 20))
COFFEE_LEVEL_FALLBACK: int = 10
MILK_LEVEL_BANDS: tuple[tuple[float, int], ...] = ((90.0, 20), (80.0, 15), (70.0, 10))
MILK_LEVEL_FALLBACK: int = 5

TEMPERATURE_PERFECT: tuple[float, float] = (160.0, 180.0)
TEMPERATURE_WARM_MIN: float = 140.0
TEMPERATURE_POINTS: dict[str, int] = {"perfect": 30, "warm": 20, "too_hot": 15, "too_cold": 5}

STIR_PERFECT: tuple[float, float] = (STIR_REQUIRED_SECONDS, 8.0)
STIRRING_POINTS: dict[str, int] = {"perfect": 20, "over": 10, "under": 5}

TOPPINGS_MATCH_POINTS: int = 20
TOPPINGS_MISMATCH_POINTS: int = 5
WHIPPED_CREAM_BONUS: int = 10
WHIPPED_CREAM_PARTIAL_BONUS: int = 5
WHIPPED_CREAM_LATE_PENALTY: int = 5
WHIPPED_CREAM_PERFECT_HOLD: tuple[float, float] = (4.5, 5.5)
WHIPPED_CREAM_GOOD_HOLD: float = 3.5

# ---------------------------------------------------------------------------
# Economy
# ---------------------------------------------------------------------------
BASE_PRICE: float = 5.00
REFUND_BELOW_SCORE: int = 50

# ---------------------------------------------------------------------------
# Event log
# ---------------------------------------------------------------------------
EVENT_LOG_LENGTH: int = 12
