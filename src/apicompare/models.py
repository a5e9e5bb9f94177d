"""Canonical Pydantic models shared across all apicompare modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`DiscoveryConfig`, :class:`CompareConfig`
    and :class:`GlobalConfig`.

**Input models** -- what the diff engine is handed:
    :class:`SpecFile` (raw document text plus bookkeeping metadata) and
    :class:`SpecDocument` (the extracted ``paths``/``models`` view of a
    parsed document).

**Result models** -- what the diff engine returns:
    :class:`ChangeType`, :class:`Severity`, :class:`ChangeDetails`,
    :class:`ApiChange`, :class:`ChangeCounts`, :class:`ComparisonSummary`,
    :class:`ComparisonDetails` and :class:`ComparisonResult`.

Result models use snake_case attribute names with camelCase aliases, so
``to_dict()`` produces the same wire shape a JavaScript consumer of the
comparison service expects (``operationId``, ``oldParams``, ...).
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

NOT_APPLICABLE = "N/A"
"""Sentinel stored in ``ApiChange.path``/``method`` for changes that are not path-scoped."""

DEFAULT_SEARCH_PATHS: tuple[str, ...] = (
    "swagger.yaml",
    "swagger.yml",
    "openapi.yaml",
    "openapi.yml",
    "api.yaml",
    "api.yml",
    "swagger/swagger.yaml",
    "swagger/swagger.yml",
    "docs/swagger.yaml",
    "docs/swagger.yml",
    "docs/openapi.yaml",
    "docs/openapi.yml",
    "openapi/openapi.yaml",
    "openapi/openapi.yml",
    "api/swagger.yaml",
    "api/swagger.yml",
    "api/openapi.yaml",
    "api/openapi.yml",
)
"""Conventional spec locations, relative to a repository root, in lookup order."""


# --- Config ---


class OutputFormatName(str, enum.Enum):
    """Output formats accepted in configuration and on the command line."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class FailOn(str, enum.Enum):
    """Threshold at which ``apicompare compare`` exits with a non-zero code.

    ``NEVER`` always exits 0 on a successful comparison, ``ANY`` fails on
    any detected change, and ``HIGH`` fails only when at least one change
    has :attr:`Severity.HIGH`.
    """

    NEVER = "never"
    ANY = "any"
    HIGH = "high"


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: OutputFormatName = Field(
        default=OutputFormatName.AUTO,
        description="Output format: auto, json, plain, rich",
    )


class DiscoveryConfig(BaseModel):
    """Where to look for a spec file when a directory is given instead of a file.

    The search list is an explicit value handed to every discovery call;
    there is no process-wide list to mutate.
    """

    search_paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEARCH_PATHS),
        description="Relative paths tried in order when discovering a spec file",
    )


class CompareConfig(BaseModel):
    """Defaults for the ``compare`` command."""

    report_method_changes: bool = Field(
        default=True,
        description="Also report methods added/removed under paths present in both versions",
    )
    fail_on: FailOn = Field(
        default=FailOn.NEVER,
        description="Exit non-zero when changes reach this threshold: never, any, high",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/apicompare/config.json``.

    Loaded and saved by :func:`~apicompare.config.load_global_config` and
    :func:`~apicompare.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~apicompare.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    compare: CompareConfig = Field(default_factory=CompareConfig)


# --- Input ---


class SpecFile(BaseModel):
    """One version of a spec document as handed to the diff engine.

    ``content`` is the raw, unparsed text. ``version``, ``commit_hash`` and
    ``commit_date`` are bookkeeping for the caller and are never examined by
    the diff logic.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    path: str
    content: str
    version: str = ""
    commit_hash: str = Field(default="", alias="commitHash")
    commit_date: Optional[datetime] = Field(default=None, alias="commitDate")


class SpecDocument(BaseModel):
    """The parts of a parsed spec the diff engine works on.

    ``paths`` maps URL path templates to path-item mappings (HTTP method ->
    operation object, plus any non-method keys the extractor ignores).
    ``models`` holds named schemas merged from Swagger 2.x ``definitions``
    and OpenAPI 3.x ``components.schemas``.
    """

    model_config = ConfigDict(frozen=True)

    paths: dict[str, Any] = Field(default_factory=dict)
    models: dict[str, Any] = Field(default_factory=dict)


# --- Results ---


class ChangeType(str, enum.Enum):
    """Kind of a detected difference."""

    NEW = "new"
    DEPRECATED = "deprecated"
    CHANGED_PATH = "changed_path"
    CHANGED_PARAM = "changed_param"
    CHANGED_MODEL = "changed_model"


class Severity(str, enum.Enum):
    """Coarse impact tier assigned heuristically per change type."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChangeDetails(BaseModel):
    """Structural breakdown attached to ``changed_model`` changes.

    ``changes`` may be empty when the two schemas differ only below the
    depth the analysis inspects; both full schemas are kept so a renderer
    can still show a side-by-side diff.
    """

    model_config = ConfigDict(
        populate_by_name=True, frozen=True, protected_namespaces=()
    )

    model_name: str = Field(alias="modelName")
    changes: list[str] = Field(default_factory=list)
    base_schema: Any = Field(default=None, alias="baseSchema")
    target_schema: Any = Field(default=None, alias="targetSchema")


class ApiChange(BaseModel):
    """A single detected difference between two spec versions.

    ``operation_id`` is the identity key: the operation's ``operationId``,
    ``"<METHOD> <path>"`` when absent, or ``"model:<name>"`` for model
    changes. ``path`` and ``method`` hold :data:`NOT_APPLICABLE` for changes
    reported below operation granularity (parameters, responses, request
    bodies, models).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    operation_id: str = Field(alias="operationId")
    type: ChangeType
    severity: Severity
    description: str
    old_path: Optional[str] = Field(default=None, alias="oldPath")
    new_path: Optional[str] = Field(default=None, alias="newPath")
    old_params: Optional[dict[str, Any]] = Field(default=None, alias="oldParams")
    new_params: Optional[dict[str, Any]] = Field(default=None, alias="newParams")
    method: Optional[str] = None
    path: Optional[str] = None
    details: Optional[ChangeDetails] = None

    @property
    def is_path_scoped(self) -> bool:
        """True when ``path`` names a real URL path rather than the sentinel."""
        return bool(self.path) and self.path != NOT_APPLICABLE

    def to_dict(self) -> dict[str, Any]:
        """Serialise with camelCase keys, omitting fields that were not set."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ChangeCounts(BaseModel):
    """Counts of one change list: ``new + changed + deprecated == total``."""

    total: int = 0
    new: int = 0
    changed: int = 0
    deprecated: int = 0


class ComparisonSummary(ChangeCounts):
    """Counts for the full change list plus the two scope partitions."""

    operations: ChangeCounts = Field(default_factory=ChangeCounts)
    models: ChangeCounts = Field(default_factory=ChangeCounts)


class ComparisonDetails(BaseModel):
    """Endpoint and model totals of both documents."""

    model_config = ConfigDict(populate_by_name=True)

    base_endpoints: int = Field(alias="baseEndpoints")
    target_endpoints: int = Field(alias="targetEndpoints")
    base_models: int = Field(alias="baseModels")
    target_models: int = Field(alias="targetModels")


class ComparisonResult(BaseModel):
    """Outcome of one comparison.

    On failure ``success`` is ``False``, every list is empty, the summary is
    all zeros and ``error`` says which document could not be parsed.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    success: bool
    changes: list[ApiChange] = Field(default_factory=list)
    operation_changes: list[ApiChange] = Field(
        default_factory=list, alias="operationChanges"
    )
    model_changes: list[ApiChange] = Field(default_factory=list, alias="modelChanges")
    summary: ComparisonSummary = Field(default_factory=ComparisonSummary)
    details: Optional[ComparisonDetails] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise with camelCase keys; ``details``/``error`` only when present."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
