"""Diff engine -- compare extracted paths and models of two spec versions.

Sub-modules:

* :mod:`~apicompare.diff.equality` -- key-order-independent structural
  equality for spec fragments.
* :mod:`~apicompare.diff.operations` -- added/removed paths and per-operation
  parameter, response, and request body changes.
* :mod:`~apicompare.diff.schemas` -- added/removed/modified models with a
  structural breakdown.
* :mod:`~apicompare.diff.summary` -- scope partitions and change counts.
"""

from apicompare.diff.operations import diff_operation, diff_paths
from apicompare.diff.schemas import analyze_model_changes, diff_models
from apicompare.diff.summary import (
    count_changes,
    partition_model_changes,
    partition_operation_changes,
    summarize,
)

__all__ = [
    "diff_paths",
    "diff_operation",
    "diff_models",
    "analyze_model_changes",
    "count_changes",
    "partition_operation_changes",
    "partition_model_changes",
    "summarize",
]
