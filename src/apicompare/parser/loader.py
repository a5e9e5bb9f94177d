"""Load spec files from a URL, local file, or stdin, and parse their text.

This module owns the two halves of getting a document into memory:

* :func:`load_spec_file` -- I/O. Reads raw text from any supported source
  and wraps it in a :class:`~apicompare.models.SpecFile`. It never parses:
  parse failures are the diff engine's business so that they surface as a
  ``success=False`` comparison rather than an exception.
* :func:`parse_spec_content` -- format sniffing and parsing. Text that
  mentions ``openapi:`` or ``swagger:`` is parsed as YAML; text starting
  with ``{`` is parsed as JSON; anything else is rejected.

After parsing, the raw dict should be passed to
:func:`~apicompare.parser.extractor.extract_document`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from apicompare.exceptions import FetchError, SpecParseError, UnsupportedFormatError
from apicompare.models import SpecFile

logger = logging.getLogger(__name__)

_YAML_MARKERS = ("openapi:", "swagger:")


def parse_spec_content(content: str) -> dict[str, Any]:
    """Parse raw spec text into a document tree.

    Detection rule, applied to the stripped text:

    1. If it contains ``openapi:`` or ``swagger:`` anywhere, parse as YAML.
    2. Otherwise, if it starts with ``{``, parse as JSON.
    3. Otherwise, fail.

    YAML mapping keys are converted to strings so that unquoted status codes
    (``200:``) match their quoted JSON counterparts (``"200"``).

    Args:
        content: The raw document text.

    Returns:
        The parsed document as a dictionary. A document without ``paths``
        or schemas is accepted as-is.

    Raises:
        UnsupportedFormatError: If neither detection rule matches.
        SpecParseError: If the YAML or JSON parser rejects the text, or the
            document root is not a mapping.
    """
    text = content.strip()

    if any(marker in text for marker in _YAML_MARKERS):
        try:
            result = _stringify_keys(yaml.safe_load(text))
        except (yaml.YAMLError, RecursionError) as exc:
            raise SpecParseError(f"Invalid YAML: {exc}") from exc
    elif text.startswith("{"):
        try:
            result = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise SpecParseError(f"Invalid JSON: {exc}") from exc
    else:
        raise UnsupportedFormatError(
            "Unsupported file format: expected OpenAPI/Swagger YAML or a JSON object"
        )

    if not isinstance(result, dict):
        raise SpecParseError(
            "Spec must be a JSON/YAML object (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result


def _stringify_keys(node: Any) -> Any:
    """Recursively convert mapping keys to strings."""
    if isinstance(node, dict):
        return {str(key): _stringify_keys(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_stringify_keys(item) for item in node]
    return node


def load_spec_file(source: str, version: Optional[str] = None) -> SpecFile:
    """Load a spec file from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        version: Label recorded on the returned :class:`SpecFile`. Defaults
            to the file name (or the source itself for URLs and stdin).

    Returns:
        A :class:`SpecFile` holding the unparsed text.

    Raises:
        FetchError: If the source cannot be read or downloaded.
    """
    if source == "-":
        return _load_from_stdin(version)
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source, version)
    else:
        return _load_from_file(source, version)


def _load_from_stdin(version: Optional[str]) -> SpecFile:
    """Read a spec from stdin.

    Raises:
        FetchError: If stdin cannot be read or is empty.
    """
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise FetchError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise FetchError("No input received from stdin")

    return SpecFile(
        path="-",
        content=content,
        version=version or "stdin",
        commit_date=datetime.now(timezone.utc),
    )


def _load_from_url(url: str, version: Optional[str]) -> SpecFile:
    """Fetch a spec from a URL.

    Args:
        url: The HTTP(S) URL to fetch.
        version: Optional version label.

    Raises:
        FetchError: If the URL cannot be fetched.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise FetchError(f"Failed to fetch spec from {url}: {exc}") from exc

    logger.debug("Fetched %d bytes from %s", len(response.content), url)
    return SpecFile(
        path=url,
        content=response.text,
        version=version or url,
        commit_hash=response.headers.get("etag", ""),
        commit_date=datetime.now(timezone.utc),
    )


def _load_from_file(path: str, version: Optional[str]) -> SpecFile:
    """Load a spec from a local file.

    The file's modification time becomes ``commit_date``.

    Args:
        path: Path to the local file.
        version: Optional version label; defaults to the file name.

    Raises:
        FetchError: If the file does not exist or cannot be read.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FetchError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
        mtime = file_path.stat().st_mtime
    except OSError as exc:
        raise FetchError(f"Failed to read spec file {path}: {exc}") from exc

    return SpecFile(
        path=str(file_path),
        content=content,
        version=version or file_path.name,
        commit_date=datetime.fromtimestamp(mtime, tz=timezone.utc),
    )
