"""Partition change lists by scope and count them.

Two partitions are derived from the full change list:

* **operations** -- path-scoped changes (``path`` is a real URL path)
  of type ``new``, ``deprecated`` or ``changed_path``.
* **models** -- changes whose ``path`` is the ``"N/A"`` sentinel, of type
  ``new``, ``deprecated`` or ``changed_model``.

``changed_param`` changes belong to neither partition; they are only
counted in the overall summary.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from apicompare.models import (
    NOT_APPLICABLE,
    ApiChange,
    ChangeCounts,
    ChangeType,
    ComparisonSummary,
)

OPERATION_PARTITION_TYPES = frozenset(
    {ChangeType.NEW, ChangeType.DEPRECATED, ChangeType.CHANGED_PATH}
)
MODEL_PARTITION_TYPES = frozenset(
    {ChangeType.NEW, ChangeType.DEPRECATED, ChangeType.CHANGED_MODEL}
)
CHANGED_TYPES = frozenset(
    {ChangeType.CHANGED_PATH, ChangeType.CHANGED_PARAM, ChangeType.CHANGED_MODEL}
)


def partition_operation_changes(changes: Iterable[ApiChange]) -> list[ApiChange]:
    """Return the path-scoped endpoint changes."""
    return [
        change
        for change in changes
        if change.is_path_scoped and change.type in OPERATION_PARTITION_TYPES
    ]


def partition_model_changes(changes: Iterable[ApiChange]) -> list[ApiChange]:
    """Return the changes reported at model granularity."""
    return [
        change
        for change in changes
        if change.path == NOT_APPLICABLE and change.type in MODEL_PARTITION_TYPES
    ]


def count_changes(changes: Sequence[ApiChange]) -> ChangeCounts:
    """Count *changes* by kind. Every change type falls in exactly one bucket."""
    new = sum(1 for change in changes if change.type == ChangeType.NEW)
    deprecated = sum(1 for change in changes if change.type == ChangeType.DEPRECATED)
    changed = sum(1 for change in changes if change.type in CHANGED_TYPES)
    return ChangeCounts(
        total=len(changes),
        new=new,
        changed=changed,
        deprecated=deprecated,
    )


def summarize(
    changes: Sequence[ApiChange],
    operation_changes: Sequence[ApiChange] | None = None,
    model_changes: Sequence[ApiChange] | None = None,
) -> ComparisonSummary:
    """Build the nested summary for a full change list.

    The partitions are computed from *changes* unless supplied.
    """
    if operation_changes is None:
        operation_changes = partition_operation_changes(changes)
    if model_changes is None:
        model_changes = partition_model_changes(changes)

    overall = count_changes(changes)
    return ComparisonSummary(
        **overall.model_dump(),
        operations=count_changes(operation_changes),
        models=count_changes(model_changes),
    )
