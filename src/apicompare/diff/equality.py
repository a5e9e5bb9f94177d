"""Structural equality for parsed spec fragments.

Spec fragments are plain ``dict``/``list``/scalar trees. Two fragments are
equal when they would serialise to the same JSON up to mapping key order:

* mappings compare by key set and per-key value, ignoring insertion order;
* sequences compare element-wise, in order;
* booleans never equal numbers (``True`` vs ``1``), while ``1`` and ``1.0``
  are the same JSON number.
"""

from __future__ import annotations

from typing import Any, Mapping


def deep_equal(left: Any, right: Any) -> bool:
    """Return True if *left* and *right* are structurally equal."""
    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if not (isinstance(left, (list, tuple)) and isinstance(right, (list, tuple))):
            return False
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    return left == right
