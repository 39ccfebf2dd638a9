from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

from config import CUSTOMERS_FILE, DRINK_KINDS, EXTRA_KINDS


@dataclass(frozen=True)
class CustomerDefinition:
    id: int
    name: str
    drink: str
    extras: tuple[str, ...] = ()
    patience: int = 100

    def to_runtime_dict(self) -> Dict[str, str | int | List[str]]:
        return {
            "name": self.name,
            "drink": self.drink,
            "extras": list(self.extras),
            "patience": self.patience,
        }


DEFAULT_CUSTOMERS: Dict[int, CustomerDefinition] = {
    1: CustomerDefinition(id=1, name="Alex", drink="coffee", patience=100),
    2: CustomerDefinition(
        id=2,
        name="Scott",
        drink="hot-chocolate",
        extras=("whipped-cream", "marshmallows"),
        patience=90,
    ),
    3: CustomerDefinition(id=3, name="Toot Toot", drink="mocha", patience=80),
    4: CustomerDefinition(id=4, name="Claire", drink="coffee", extras=("marshmallows",), patience=80),
    5: CustomerDefinition(
        id=5,
        name="Scoobers",
        drink="hot-chocolate",
        extras=("whipped-cream", "marshmallows"),
        patience=90,
    ),
}


def _coerce_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, str) and value.strip().isdigit():
        result = int(value.strip())
    else:
        return None
    return result if result >= 1 else None


def _coerce_patience(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        return None
    return value


def _parse_customer_entry(key: Any, entry: Dict[str, Any]) -> CustomerDefinition | None:
    customer_id = _coerce_id(key)
    if customer_id is None:
        return None

    name = entry.get("name")
    drink = entry.get("drink")
    extras = entry.get("extras", [])
    patience = _coerce_patience(entry.get("patience", 100))

    if not isinstance(name, str) or not name.strip():
        return None
    if drink not in DRINK_KINDS:
        return None
    if not isinstance(extras, list) or not all(isinstance(e, str) for e in extras):
        return None
    if not all(e in EXTRA_KINDS for e in extras):
        return None
    if len(set(extras)) != len(extras):
        return None
    if patience is None:
        return None

    return CustomerDefinition(
        id=customer_id,
        name=name.strip(),
        drink=drink,
        extras=tuple(extras),
        patience=patience,
    )


def _ordered_runtime_catalog(definitions: Iterable[CustomerDefinition]) -> Dict[int, Dict[str, str | int | List[str]]]:
    ordered = sorted(definitions, key=lambda definition: definition.id)
    return {definition.id: definition.to_runtime_dict() for definition in ordered}


def load_customer_catalog(path: Path = CUSTOMERS_FILE) -> Dict[int, Dict[str, str | int | List[str]]]:
    if not path.exists():
        return _ordered_runtime_catalog(DEFAULT_CUSTOMERS.values())

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return _ordered_runtime_catalog(DEFAULT_CUSTOMERS.values())

    if not isinstance(raw, dict):
        return _ordered_runtime_catalog(DEFAULT_CUSTOMERS.values())

    customers: Dict[int, CustomerDefinition] = {}
    for key, entry in raw.items():
        if not isinstance(entry, dict):
            continue
        definition = _parse_customer_entry(key, entry)
        if definition is None:
            continue
        customers[definition.id] = definition

    if not customers:
        return _ordered_runtime_catalog(DEFAULT_CUSTOMERS.values())

    return _ordered_runtime_catalog(customers.values())
