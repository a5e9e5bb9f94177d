"""Diff the named models (schemas) of two spec versions.

Models are matched by name. A model present on both sides whose schema
differs anywhere is reported once as ``changed_model``, with a shallow,
human-readable breakdown from :func:`analyze_model_changes` in its
``details``.

Model changes use ``operation_id = "model:<name>"`` so they share a
namespace with operation identities, and carry ``path``/``method`` =
``"N/A"``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from apicompare.diff.equality import deep_equal
from apicompare.models import (
    NOT_APPLICABLE,
    ApiChange,
    ChangeDetails,
    ChangeType,
    Severity,
)
from apicompare.parser.extractor import as_mapping

logger = logging.getLogger(__name__)


def model_identity(name: str) -> str:
    """Return the change identity used for the model called *name*."""
    return f"model:{name}"


def diff_models(
    base_models: Mapping[str, Any],
    target_models: Mapping[str, Any],
) -> list[ApiChange]:
    """Compare two name -> schema mappings.

    Emits added models, then removed models, then modified models.

    Args:
        base_models: Merged models of the older document.
        target_models: Merged models of the newer document.

    Returns:
        The detected model changes.
    """
    changes: list[ApiChange] = []

    for name, schema in target_models.items():
        if name not in base_models:
            changes.append(
                ApiChange(
                    operation_id=model_identity(name),
                    type=ChangeType.NEW,
                    severity=Severity.LOW,
                    description=f"New model: {name}",
                    new_params={name: schema},
                    method=NOT_APPLICABLE,
                    path=NOT_APPLICABLE,
                )
            )

    for name, schema in base_models.items():
        if name not in target_models:
            changes.append(
                ApiChange(
                    operation_id=model_identity(name),
                    type=ChangeType.DEPRECATED,
                    severity=Severity.MEDIUM,
                    description=f"Removed model: {name}",
                    old_params={name: schema},
                    method=NOT_APPLICABLE,
                    path=NOT_APPLICABLE,
                )
            )

    for name, base_schema in base_models.items():
        if name not in target_models:
            continue
        target_schema = target_models[name]
        if deep_equal(base_schema, target_schema):
            continue

        model_changes = analyze_model_changes(base_schema, target_schema)
        description = f"Model schema changed: {name}"
        if model_changes:
            description += f" ({len(model_changes)} changes)"

        changes.append(
            ApiChange(
                operation_id=model_identity(name),
                type=ChangeType.CHANGED_MODEL,
                severity=Severity.MEDIUM,
                description=description,
                old_params={name: base_schema},
                new_params={name: target_schema},
                method=NOT_APPLICABLE,
                path=NOT_APPLICABLE,
                details=ChangeDetails(
                    model_name=name,
                    changes=model_changes,
                    base_schema=base_schema,
                    target_schema=target_schema,
                ),
            )
        )

    logger.debug("Model diff: %d changes", len(changes))
    return changes


def analyze_model_changes(base_schema: Any, target_schema: Any) -> list[str]:
    """Describe how a model's top level changed between two versions.

    Lines are produced in a fixed order: type change; added, then removed
    required fields; added, removed, then modified properties; description
    change; title change. Only the top level is inspected, so two schemas
    that differ solely inside a nested property yield a "Modified
    properties" line at most, and schemas that differ only in other
    keywords yield no lines at all.

    Args:
        base_schema: The model's schema in the older document.
        target_schema: The model's schema in the newer document.

    Returns:
        Human-readable change lines, possibly empty.

    Example::

        >>> analyze_model_changes(
        ...     {"required": ["a", "b"]}, {"required": ["b", "c"]}
        ... )
        ['Added required fields: c', 'Removed required fields: a']
    """
    base = as_mapping(base_schema)
    target = as_mapping(target_schema)
    changes: list[str] = []

    if not deep_equal(base.get("type"), target.get("type")):
        changes.append(
            f"Type changed: {_format_type(base.get('type'))} → {_format_type(target.get('type'))}"
        )

    base_required = _as_name_list(base.get("required"))
    target_required = _as_name_list(target.get("required"))
    added_required = [f for f in target_required if f not in base_required]
    removed_required = [f for f in base_required if f not in target_required]
    if added_required:
        changes.append(f"Added required fields: {', '.join(added_required)}")
    if removed_required:
        changes.append(f"Removed required fields: {', '.join(removed_required)}")

    base_properties = as_mapping(base.get("properties"))
    target_properties = as_mapping(target.get("properties"))
    added_properties = [k for k in target_properties if k not in base_properties]
    removed_properties = [k for k in base_properties if k not in target_properties]
    modified_properties = [
        k
        for k in base_properties
        if k in target_properties
        and not deep_equal(base_properties[k], target_properties[k])
    ]
    if added_properties:
        changes.append(f"Added properties: {', '.join(added_properties)}")
    if removed_properties:
        changes.append(f"Removed properties: {', '.join(removed_properties)}")
    if modified_properties:
        changes.append(f"Modified properties: {', '.join(modified_properties)}")

    if not deep_equal(base.get("description"), target.get("description")):
        changes.append("Description changed")

    if not deep_equal(base.get("title"), target.get("title")):
        changes.append("Title changed")

    return changes


def _format_type(value: Any) -> str:
    """Render a schema ``type`` for display; absent types read ``undefined``."""
    if value is None or value == "":
        return "undefined"
    if isinstance(value, list):
        return ",".join(str(item) for item in value)
    return str(value)


def _as_name_list(value: Any) -> list[str]:
    """Return ``required`` as a list of names; anything but a list reads as empty."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]
