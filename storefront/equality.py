"""Structural (deep value) equality for store snapshots and selections."""
import dataclasses
import math
from collections.abc import Mapping, Set
from decimal import Decimal
from enum import Enum
from typing import Any


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def deep_equal(a: Any, b: Any) -> bool:
    """
    Compare two values by content rather than identity.

    - dataclass instances: same class and equal fields
    - mappings: same keys, equal values
    - lists/tuples: same container kind, same length, equal items in order
    - sets: plain set equality
    - NaN equals NaN
    - bool never equals a number, an Enum member equals its value
    """
    if a is b:
        return True

    if isinstance(a, Enum):
        a = a.value
    if isinstance(b, Enum):
        b = b.value

    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    if dataclasses.is_dataclass(a) and not isinstance(a, type):
        if type(a) is not type(b):
            return False
        return all(
            deep_equal(getattr(a, f.name), getattr(b, f.name))
            for f in dataclasses.fields(a)
        )

    if isinstance(a, Mapping):
        if not isinstance(b, Mapping) or len(a) != len(b):
            return False
        for key in a:
            if key not in b or not deep_equal(a[key], b[key]):
                return False
        return True

    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)) or isinstance(a, list) != isinstance(b, list):
            return False
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    if isinstance(a, Set):
        return isinstance(b, Set) and a == b

    if _is_nan(a) and _is_nan(b):
        return True

    try:
        return bool(a == b)
    except (TypeError, ArithmeticError):
        return False
