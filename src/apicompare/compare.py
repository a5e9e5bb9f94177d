"""Comparison orchestrator -- the single entry point of the diff engine.

:func:`compare_files` takes two already-fetched
:class:`~apicompare.models.SpecFile` records and returns a
:class:`~apicompare.models.ComparisonResult`:

1. Parse both documents (:func:`~apicompare.parser.loader.parse_spec_content`).
2. Extract ``paths`` and merged models from each
   (:func:`~apicompare.parser.extractor.extract_document`).
3. Diff operations and models independently.
4. Partition and summarise the combined change list.

Parse failures never escape: they become a ``success=False`` result whose
``error`` names the document that failed. The engine performs no I/O and
keeps no state between calls.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from apicompare.diff.operations import diff_paths
from apicompare.diff.schemas import diff_models
from apicompare.diff.summary import (
    partition_model_changes,
    partition_operation_changes,
    summarize,
)
from apicompare.exceptions import SpecParseError
from apicompare.models import (
    ComparisonDetails,
    ComparisonResult,
    ComparisonSummary,
    SpecFile,
)
from apicompare.parser.extractor import count_endpoints, count_models, extract_document
from apicompare.parser.loader import parse_spec_content

logger = logging.getLogger(__name__)

TOOL_NAME = "apicompare"


def compare_files(
    base: SpecFile,
    target: SpecFile,
    *,
    report_method_changes: bool = True,
) -> ComparisonResult:
    """Compare two versions of a spec document.

    Args:
        base: The older version.
        target: The newer version.
        report_method_changes: Report methods added or removed under paths
            present in both versions. Off limits additions and removals to
            whole paths.

    Returns:
        The comparison result. ``success`` is ``False`` when either
        document could not be parsed.

    Example::

        result = compare_files(
            SpecFile(path="v1.yaml", content=old_text, version="v1"),
            SpecFile(path="v2.yaml", content=new_text, version="v2"),
        )
        print(result.summary.total)
    """
    logger.info("Comparing %s -> %s", base.version or base.path, target.version or target.path)

    try:
        base_raw = parse_spec_content(base.content)
    except SpecParseError as exc:
        return _failure("base", base, exc)
    try:
        target_raw = parse_spec_content(target.content)
    except SpecParseError as exc:
        return _failure("target", target, exc)

    return compare_documents(
        base_raw, target_raw, report_method_changes=report_method_changes
    )


def compare_documents(
    base_raw: Mapping[str, Any],
    target_raw: Mapping[str, Any],
    *,
    report_method_changes: bool = True,
) -> ComparisonResult:
    """Compare two parsed spec documents.

    Args:
        base_raw: Parsed older document.
        target_raw: Parsed newer document.
        report_method_changes: See :func:`compare_files`.

    Returns:
        A successful :class:`ComparisonResult`. Operation changes come
        first in ``changes``, followed by model changes.
    """
    base_doc = extract_document(base_raw)
    target_doc = extract_document(target_raw)

    changes = diff_paths(
        base_doc.paths,
        target_doc.paths,
        report_method_changes=report_method_changes,
    )
    changes.extend(diff_models(base_doc.models, target_doc.models))

    operation_changes = partition_operation_changes(changes)
    model_changes = partition_model_changes(changes)
    summary = summarize(changes, operation_changes, model_changes)

    details = ComparisonDetails(
        base_endpoints=count_endpoints(base_doc),
        target_endpoints=count_endpoints(target_doc),
        base_models=count_models(base_doc),
        target_models=count_models(target_doc),
    )

    logger.info(
        "Comparison completed: %d changes found (Operations: %d, Models: %d)",
        summary.total,
        summary.operations.total,
        summary.models.total,
    )

    return ComparisonResult(
        success=True,
        changes=changes,
        operation_changes=operation_changes,
        model_changes=model_changes,
        summary=summary,
        details=details,
    )


def _failure(side: str, spec_file: SpecFile, exc: SpecParseError) -> ComparisonResult:
    message = f"Failed to parse {side} specification ({spec_file.path}): {exc}"
    logger.warning("Failed to parse %s specification (%s): %s", side, spec_file.path, exc)
    return ComparisonResult(
        success=False,
        changes=[],
        operation_changes=[],
        model_changes=[],
        summary=ComparisonSummary(),
        error=message,
    )


def build_comparison_report(
    base: SpecFile,
    target: SpecFile,
    result: ComparisonResult,
) -> dict[str, Any]:
    """Wrap a result in the envelope a comparison service returns.

    Echoes the bookkeeping metadata of both files alongside the result.

    Args:
        base: The older version that was compared.
        target: The newer version that was compared.
        result: The outcome of :func:`compare_files`.

    Returns:
        A JSON-serialisable dict with ``comparison``, ``success``,
        ``changes``, ``operationChanges``, ``modelChanges``, ``summary``,
        optional ``details``/``error`` and ``metadata``.
    """
    report: dict[str, Any] = {
        "comparison": {
            "baseVersion": base.version,
            "targetVersion": target.version,
            "baseFile": _file_metadata(base),
            "targetFile": _file_metadata(target),
        },
    }
    report.update(result.to_dict())
    report["metadata"] = {
        "comparedAt": datetime.now(timezone.utc).isoformat(),
        "tool": TOOL_NAME,
        "format": "json",
    }
    return report


def _file_metadata(spec_file: SpecFile) -> dict[str, Any]:
    return {
        "path": spec_file.path,
        "version": spec_file.version,
        "commitHash": spec_file.commit_hash,
        "commitDate": spec_file.commit_date.isoformat() if spec_file.commit_date else None,
        "size": len(spec_file.content),
    }
