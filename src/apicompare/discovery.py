"""Find spec files inside a checked-out repository directory.

When the ``compare`` command is given a directory instead of a file, the
spec is looked up at a list of conventional relative locations
(``openapi.yaml``, ``docs/swagger.yml``, ...). The list is always passed in
explicitly, usually from :class:`~apicompare.models.DiscoveryConfig`;
:data:`DEFAULT_SEARCH_PATHS` is an immutable default.

Fetching from a source-control host or walking branches and tags is out of
scope: check the versions out (``git worktree add``) and point discovery at
each directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from apicompare.exceptions import FetchError
from apicompare.models import DEFAULT_SEARCH_PATHS, SpecFile
from apicompare.parser.loader import load_spec_file

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_SEARCH_PATHS",
    "discover_spec_files",
    "find_spec_file",
    "looks_like_spec",
    "resolve_spec_source",
]


def looks_like_spec(content: str) -> bool:
    """Return True if *content* appears to be an OpenAPI/Swagger document.

    YAML text qualifies when it mentions ``openapi:`` or ``swagger:``. JSON
    text qualifies when it parses to an object with a top-level ``openapi``
    or ``swagger`` key.
    """
    if "openapi:" in content or "swagger:" in content:
        return True

    text = content.strip()
    if not text.startswith("{"):
        return False
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        return False
    return isinstance(data, dict) and bool(data.get("openapi") or data.get("swagger"))


def discover_spec_files(
    root: Path,
    search_paths: Sequence[str] = DEFAULT_SEARCH_PATHS,
    version: Optional[str] = None,
) -> list[SpecFile]:
    """Return every spec file found under *root*, in *search_paths* order.

    Files that exist but do not look like a spec are skipped.

    Args:
        root: Directory to search.
        search_paths: Relative paths to try, in order.
        version: Label recorded on each returned :class:`SpecFile`.
            Defaults to the directory name.

    Returns:
        The spec files found, possibly empty.

    Raises:
        FetchError: If *root* is not a directory.
    """
    if not root.is_dir():
        raise FetchError(f"Not a directory: {root}")

    label = version or root.resolve().name
    found: list[SpecFile] = []
    for relative in search_paths:
        candidate = root / relative
        if not candidate.is_file():
            continue
        spec_file = load_spec_file(str(candidate), version=label)
        if not looks_like_spec(spec_file.content):
            logger.debug("Skipping %s: not an OpenAPI/Swagger document", candidate)
            continue
        logger.debug("Found spec file: %s", candidate)
        found.append(spec_file.model_copy(update={"path": relative}))

    return found


def find_spec_file(
    root: Path,
    search_paths: Sequence[str] = DEFAULT_SEARCH_PATHS,
    version: Optional[str] = None,
) -> SpecFile:
    """Return the first spec file found under *root*.

    Raises:
        FetchError: If *root* is not a directory or holds no spec file at
            any of *search_paths*.
    """
    files = discover_spec_files(root, search_paths, version=version)
    if not files:
        raise FetchError(
            f"No OpenAPI/Swagger file found in {root} "
            f"(searched {len(search_paths)} locations)"
        )
    return files[0]


def resolve_spec_source(
    source: str,
    search_paths: Sequence[str] = DEFAULT_SEARCH_PATHS,
) -> SpecFile:
    """Load *source* as a file, URL, stdin, or checked-out directory.

    Directories are searched with :func:`find_spec_file`; anything else is
    handed to :func:`~apicompare.parser.loader.load_spec_file`.

    Raises:
        FetchError: If the source cannot be read or a directory holds no
            spec file.
    """
    if source != "-" and not source.startswith(("http://", "https://")):
        root = Path(source)
        if root.is_dir():
            return find_spec_file(root, search_paths)
    return load_spec_file(source)
