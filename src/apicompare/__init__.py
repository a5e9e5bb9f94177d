"""apicompare -- Detect changes between two versions of an OpenAPI/Swagger spec.

This package parses two versions of an API description (Swagger 2.x or
OpenAPI 3.x, YAML or JSON), extracts their operations and named models, and
reports every difference as a structured, severity-tagged change record with
summary counts.

Typical workflow::

    apicompare compare v1/openapi.yaml v2/openapi.yaml
    apicompare compare ./old-checkout ./new-checkout --fail-on high

Library use::

    from apicompare.compare import compare_files
    from apicompare.parser import load_spec_file

    result = compare_files(load_spec_file("v1.yaml"), load_spec_file("v2.yaml"))

Modules:
    app: Typer application and CLI entry point.
    compare: Comparison orchestrator.
    diff: Operation and model differs, partitions and counts.
    parser: Spec loading, parsing and extraction.
    discovery: Spec file lookup inside a checked-out directory.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
