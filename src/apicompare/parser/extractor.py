"""Extract paths, operations, and models from parsed spec documents.

Both spec dialects share the ``paths`` structure for operations but keep
named schemas in different places:

* Swagger 2.x -- top-level ``definitions``.
* OpenAPI 3.x -- ``components.schemas``.

:func:`extract_document` builds a :class:`~apicompare.models.SpecDocument`
holding the ``paths`` mapping and the merged model mapping. Absent or
malformed containers degrade to empty mappings rather than raising, so an
empty document compares cleanly against a populated one.

``$ref`` pointers are not resolved: schemas are compared structurally as
they appear in the document.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from apicompare.models import SpecDocument

# HTTP methods treated as operations under a path item
HTTP_METHODS = frozenset({"get", "post", "put", "delete", "patch", "head", "options"})


def is_http_method(key: Any) -> bool:
    """Return True if *key* names an operation under a path item.

    The match is case-insensitive. Other path-item keys (``parameters``,
    ``summary``, ``servers``, ``$ref``, extensions) are not operations.
    """
    return isinstance(key, str) and key.lower() in HTTP_METHODS


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return *value* if it is a mapping, otherwise an empty dict."""
    return value if isinstance(value, Mapping) else {}


def extract_document(raw_spec: Mapping[str, Any]) -> SpecDocument:
    """Extract a :class:`~apicompare.models.SpecDocument` from a parsed spec.

    Args:
        raw_spec: The parsed spec dictionary as returned by
            :func:`~apicompare.parser.loader.parse_spec_content`.

    Returns:
        The document's ``paths`` and merged ``models``.

    Example::

        raw = parse_spec_content(text)
        doc = extract_document(raw)
        for path, item in doc.paths.items():
            print(path, [m for m in item if is_http_method(m)])
    """
    return SpecDocument(
        paths=dict(extract_paths(raw_spec)),
        models=extract_models(raw_spec),
    )


def extract_paths(raw_spec: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the spec's ``paths`` mapping, or an empty dict if absent."""
    return as_mapping(raw_spec.get("paths"))


def extract_models(raw_spec: Mapping[str, Any]) -> dict[str, Any]:
    """Merge named schemas from both dialect locations.

    ``definitions`` entries are merged first, then ``components.schemas``
    on top, so the 3.x entry wins when a name appears in both.
    """
    models: dict[str, Any] = {}
    models.update(as_mapping(raw_spec.get("definitions")))
    components = as_mapping(raw_spec.get("components"))
    models.update(as_mapping(components.get("schemas")))
    return models


def iter_operations(path_item: Any) -> Iterator[tuple[str, Any]]:
    """Yield ``(method, operation)`` pairs for the valid methods of a path item."""
    for method, operation in as_mapping(path_item).items():
        if is_http_method(method):
            yield method, operation


def count_endpoints(document: SpecDocument) -> int:
    """Count valid method keys across all path items of *document*."""
    return sum(
        sum(1 for _ in iter_operations(path_item))
        for path_item in document.paths.values()
    )


def count_models(document: SpecDocument) -> int:
    """Count the merged model names of *document*."""
    return len(document.models)
