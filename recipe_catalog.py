from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

from config import BASE_KINDS, COFFEE, DRINK_KINDS, HOT_CHOCOLATE, MOCHA, RECIPES_FILE

MAX_STEPS = 15


@dataclass(frozen=True)
class RecipeDefinition:
    key: str
    display_name: str
    bases: tuple[str, ...]
    steps: tuple[str, ...] = ()

    def to_runtime_dict(self) -> Dict[str, str | List[str]]:
        return {
            "display_name": self.display_name,
            "bases": list(self.bases),
            "steps": list(self.steps),
        }


DEFAULT_RECIPE_DEFINITIONS: Dict[str, RecipeDefinition] = {
    COFFEE: RecipeDefinition(
        key=COFFEE,
        display_name="Coffee",
        bases=(COFFEE,),
        steps=(
            "Place a cup in the coffee machine",
            "Brew until the cup is nearly full",
            "Add cold milk",
            "Complete the drink and serve",
        ),
    ),
    HOT_CHOCOLATE: RecipeDefinition(
        key=HOT_CHOCOLATE,
        display_name="Hot Chocolate",
        bases=(HOT_CHOCOLATE,),
        steps=(
            "Place a cup",
            "Put the kettle on the stove and turn it on",
            "Wait for the kettle to heat (watch the temperature!)",
            "Hold to pour hot milk",
            "Add a spoon of chocolate",
            "Hold to stir for 3 seconds",
            "Add toppings (optional)",
            "Complete the drink and serve",
        ),
    ),
    MOCHA: RecipeDefinition(
        key=MOCHA,
        display_name="Mocha",
        bases=(COFFEE, HOT_CHOCOLATE),
        steps=(
            "Place a cup in the coffee machine",
            "Brew coffee to half a cup",
            "Put the kettle on the stove and turn it on",
            "Wait for the kettle to heat (watch the temperature!)",
            "Hold to pour hot milk into the other half",
            "Add a spoon of chocolate",
            "Hold to stir for 3 seconds",
            "Add toppings (optional)",
            "Complete the drink and serve",
        ),
    ),
}


def _coerce_str_list(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, list) or not all(isinstance(i, str) for i in value):
        return None
    return tuple(value)


def _parse_recipe_entry(key: str, entry: Dict[str, Any]) -> RecipeDefinition | None:
    if key not in DRINK_KINDS:
        return None

    display_name = entry.get("display_name")
    bases = _coerce_str_list(entry.get("bases"))
    steps = _coerce_str_list(entry.get("steps", []))

    if not isinstance(display_name, str) or not display_name.strip():
        return None
    if bases is None or steps is None:
        return None
    if not bases or not all(base in BASE_KINDS for base in bases):
        return None
    if len(set(bases)) != len(bases):
        return None
    expected = DEFAULT_RECIPE_DEFINITIONS[key].bases
    if set(bases) != set(expected):
        return None
    if len(steps) > MAX_STEPS or not all(step.strip() for step in steps):
        return None

    return RecipeDefinition(
        key=key,
        display_name=display_name.strip(),
        bases=bases,
        steps=tuple(step.strip() for step in steps),
    )


def _ordered_runtime_catalog(recipes: Iterable[RecipeDefinition]) -> Dict[str, Dict[str, str | List[str]]]:
    ordered = sorted(recipes, key=lambda recipe: (len(recipe.bases), DRINK_KINDS.index(recipe.key)))
    return {recipe.key: recipe.to_runtime_dict() for recipe in ordered}


def load_recipe_catalog(path: Path = RECIPES_FILE) -> Dict[str, Dict[str, str | List[str]]]:
    """Recipe book keyed by drink kind.

    Entries from ``path`` replace the built-in recipe for the same drink;
    drinks missing from the file keep their built-in recipe.
    """
    recipes: Dict[str, RecipeDefinition] = dict(DEFAULT_RECIPE_DEFINITIONS)
    if not path.exists():
        return _ordered_runtime_catalog(recipes.values())

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return _ordered_runtime_catalog(recipes.values())

    if not isinstance(raw, dict):
        return _ordered_runtime_catalog(recipes.values())

    for key, entry in raw.items():
        if not isinstance(key, str) or not isinstance(entry, dict):
            continue
        recipe = _parse_recipe_entry(key, entry)
        if recipe is None:
            continue
        recipes[key] = recipe

    return _ordered_runtime_catalog(recipes.values())
