"""Diff the ``paths`` sections of two spec versions.

:func:`diff_paths` reports whole paths that appeared or disappeared, then
compares every operation that exists on both sides under a shared path via
:func:`diff_operation`.

Operation identity is path + method. The ``operationId`` is carried on
each change for display and correlation, but two operations are never
matched by ``operationId`` alone because it is not guaranteed stable
across versions.

Severity heuristic:

================================  =============  ========
Change                            Type           Severity
================================  =============  ========
Path added (per method)           new            low
Path removed (per method)         deprecated     high
Parameter added                   changed_param  medium
Parameter removed                 changed_param  high
Parameter modified                changed_param  medium
Response code added               changed_param  low
Response code removed             changed_param  medium
Request body modified             changed_model  medium
================================  =============  ========

Changes below operation granularity (parameters, responses, request
bodies) carry ``path``/``method`` = ``"N/A"``; callers correlate them to
an operation through ``operation_id``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from apicompare.diff.equality import deep_equal
from apicompare.models import NOT_APPLICABLE, ApiChange, ChangeType, Severity
from apicompare.parser.extractor import as_mapping, iter_operations

logger = logging.getLogger(__name__)


def operation_identity(operation: Any, path: str, method: str) -> str:
    """Return the operation's ``operationId``, or ``"<METHOD> <path>"`` when absent."""
    operation_id = as_mapping(operation).get("operationId")
    return str(operation_id) if operation_id else f"{method.upper()} {path}"


def diff_paths(
    base_paths: Mapping[str, Any],
    target_paths: Mapping[str, Any],
    *,
    report_method_changes: bool = True,
) -> list[ApiChange]:
    """Compare two ``paths`` mappings.

    Emits, in order: one ``new`` change per operation of every path only in
    *target_paths*; one ``deprecated`` change per operation of every path
    only in *base_paths*; then the operation-pair diffs for every method
    present on both sides of a shared path.

    A method added to or removed from a path that exists in both versions is
    reported like a whole-path addition or removal, after the pair diffs of
    that path. With *report_method_changes* off, such methods are not
    reported at all and only whole paths count as added or removed.

    Args:
        base_paths: ``paths`` of the older document.
        target_paths: ``paths`` of the newer document.
        report_method_changes: Report method-level additions and removals
            inside shared paths.

    Returns:
        The detected changes.
    """
    changes: list[ApiChange] = []

    for path, path_item in target_paths.items():
        if path not in base_paths:
            for method, operation in iter_operations(path_item):
                changes.append(_added_operation(operation, path, method))

    for path, path_item in base_paths.items():
        if path not in target_paths:
            for method, operation in iter_operations(path_item):
                changes.append(_removed_operation(operation, path, method))

    for path, base_item in base_paths.items():
        if path not in target_paths:
            continue
        target_item = as_mapping(target_paths[path])

        for method, base_operation in iter_operations(base_item):
            target_operation = target_item.get(method)
            if target_operation is not None:
                changes.extend(
                    diff_operation(base_operation, target_operation, path, method)
                )

        if report_method_changes:
            changes.extend(_diff_methods(base_item, target_item, path))

    logger.debug("Path diff: %d changes", len(changes))
    return changes


def _diff_methods(base_item: Any, target_item: Any, path: str) -> list[ApiChange]:
    """Report methods present on only one side of a shared path."""
    base_methods = as_mapping(base_item)
    target_methods = as_mapping(target_item)
    changes: list[ApiChange] = []

    for method, operation in iter_operations(target_methods):
        if method not in base_methods:
            changes.append(_added_operation(operation, path, method))

    for method, operation in iter_operations(base_methods):
        if method not in target_methods:
            changes.append(_removed_operation(operation, path, method))

    return changes


def _added_operation(operation: Any, path: str, method: str) -> ApiChange:
    verb = method.upper()
    return ApiChange(
        operation_id=operation_identity(operation, path, method),
        type=ChangeType.NEW,
        severity=Severity.LOW,
        description=f"New endpoint: {verb} {path}",
        new_path=path,
        method=verb,
        path=path,
    )


def _removed_operation(operation: Any, path: str, method: str) -> ApiChange:
    verb = method.upper()
    return ApiChange(
        operation_id=operation_identity(operation, path, method),
        type=ChangeType.DEPRECATED,
        severity=Severity.HIGH,
        description=f"Deprecated endpoint: {verb} {path}",
        old_path=path,
        method=verb,
        path=path,
    )


def diff_operation(
    base_operation: Any,
    target_operation: Any,
    path: str,
    method: str,
) -> list[ApiChange]:
    """Compare one operation across two versions.

    Parameters, responses and the request body are each compared only when
    both operations declare them.

    Args:
        base_operation: The operation object from the older document.
        target_operation: The operation object at the same path and method
            in the newer document.
        path: The shared URL path template.
        method: The shared HTTP method key.

    Returns:
        Parameter changes, then response changes, then the request body
        change, all keyed by the base operation's identity.
    """
    base_op = as_mapping(base_operation)
    target_op = as_mapping(target_operation)
    operation_id = operation_identity(base_op, path, method)
    changes: list[ApiChange] = []

    if base_op.get("parameters") is not None and target_op.get("parameters") is not None:
        changes.extend(
            diff_parameters(base_op["parameters"], target_op["parameters"], operation_id)
        )

    if base_op.get("responses") is not None and target_op.get("responses") is not None:
        changes.extend(
            diff_responses(base_op["responses"], target_op["responses"], operation_id)
        )

    if base_op.get("requestBody") is not None and target_op.get("requestBody") is not None:
        changes.extend(
            diff_request_body(base_op["requestBody"], target_op["requestBody"], operation_id)
        )

    return changes


def _parameter_key(param: Mapping[str, Any]) -> tuple[Any, Any]:
    return param.get("name"), param.get("in")


def _parameter_name(param: Mapping[str, Any]) -> str:
    return str(param.get("name"))


def _parameter_label(param: Mapping[str, Any]) -> str:
    return f"{param.get('in')}.{param.get('name')}"


def diff_parameters(
    base_params: Any,
    target_params: Any,
    operation_id: str,
) -> list[ApiChange]:
    """Compare two parameter lists keyed by ``(name, in)``.

    Added parameters are reported first, then removed ones, then those whose
    full definition changed. Non-mapping entries are ignored.
    """
    base_list = [p for p in _as_list(base_params) if isinstance(p, Mapping)]
    target_list = [p for p in _as_list(target_params) if isinstance(p, Mapping)]

    base_lookup: dict[tuple[Any, Any], Mapping[str, Any]] = {}
    for param in base_list:
        base_lookup.setdefault(_parameter_key(param), param)
    target_lookup: dict[tuple[Any, Any], Mapping[str, Any]] = {}
    for param in target_list:
        target_lookup.setdefault(_parameter_key(param), param)

    changes: list[ApiChange] = []

    for param in target_list:
        if _parameter_key(param) not in base_lookup:
            changes.append(
                _param_change(
                    operation_id,
                    Severity.MEDIUM,
                    f"New parameter: {_parameter_label(param)}",
                    new_params={_parameter_name(param): param},
                )
            )

    for param in base_list:
        if _parameter_key(param) not in target_lookup:
            changes.append(
                _param_change(
                    operation_id,
                    Severity.HIGH,
                    f"Removed parameter: {_parameter_label(param)}",
                    old_params={_parameter_name(param): param},
                )
            )

    for param in base_list:
        counterpart = target_lookup.get(_parameter_key(param))
        if counterpart is not None and not deep_equal(param, counterpart):
            changes.append(
                _param_change(
                    operation_id,
                    Severity.MEDIUM,
                    f"Modified parameter: {_parameter_label(param)}",
                    old_params={_parameter_name(param): param},
                    new_params={_parameter_name(counterpart): counterpart},
                )
            )

    return changes


def diff_responses(
    base_responses: Any,
    target_responses: Any,
    operation_id: str,
) -> list[ApiChange]:
    """Compare the declared status codes of two ``responses`` mappings.

    Only existence is compared; a status code present on both sides is not
    inspected for content changes.
    """
    base_map = as_mapping(base_responses)
    target_map = as_mapping(target_responses)
    changes: list[ApiChange] = []

    for code, response in target_map.items():
        if code not in base_map:
            changes.append(
                _param_change(
                    operation_id,
                    Severity.LOW,
                    f"New response code: {code}",
                    new_params={str(code): response},
                )
            )

    for code, response in base_map.items():
        if code not in target_map:
            changes.append(
                _param_change(
                    operation_id,
                    Severity.MEDIUM,
                    f"Removed response code: {code}",
                    old_params={str(code): response},
                )
            )

    return changes


def diff_request_body(
    base_body: Any,
    target_body: Any,
    operation_id: str,
) -> list[ApiChange]:
    """Report a single change when two request bodies differ at all.

    No field-level breakdown is produced; both bodies are attached whole.
    """
    if deep_equal(base_body, target_body):
        return []
    return [
        ApiChange(
            operation_id=operation_id,
            type=ChangeType.CHANGED_MODEL,
            severity=Severity.MEDIUM,
            description="Request body schema changed",
            old_params={"requestBody": base_body},
            new_params={"requestBody": target_body},
            method=NOT_APPLICABLE,
            path=NOT_APPLICABLE,
        )
    ]


def _param_change(
    operation_id: str,
    severity: Severity,
    description: str,
    *,
    old_params: dict[str, Any] | None = None,
    new_params: dict[str, Any] | None = None,
) -> ApiChange:
    return ApiChange(
        operation_id=operation_id,
        type=ChangeType.CHANGED_PARAM,
        severity=severity,
        description=description,
        old_params=old_params,
        new_params=new_params,
        method=NOT_APPLICABLE,
        path=NOT_APPLICABLE,
    )


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
