"""Spec parser -- load raw text, parse it, and extract paths and models.

This sub-package turns a raw OpenAPI 3.x or Swagger 2.x document (JSON or
YAML, local file, remote URL, or stdin) into a
:class:`~apicompare.models.SpecDocument` the diff engine can consume.

Typical usage::

    from apicompare.parser import load_spec_file, parse_spec_content, extract_document

    spec_file = load_spec_file("openapi.yaml")
    raw = parse_spec_content(spec_file.content)
    document = extract_document(raw)

Sub-modules:

* :mod:`~apicompare.parser.loader` -- I/O layer (URL, file, stdin) plus
  format sniffing and parsing.
* :mod:`~apicompare.parser.extractor` -- ``paths`` and merged model
  extraction across both spec dialects.
"""

from apicompare.parser.extractor import extract_document
from apicompare.parser.loader import load_spec_file, parse_spec_content

__all__ = ["load_spec_file", "parse_spec_content", "extract_document"]
