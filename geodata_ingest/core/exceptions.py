"""Exception taxonomy shared by the pipeline, the loader and configuration.

Every error raised by ``geodata_ingest`` derives from ``PipelineError``
and carries where it happened (``stage``), what it was (``code``) and
whether trying again can help (``retryable``).  Callers such as the
dashboard data layer or a batch repair job branch on those fields, not
on message text.

Categories
----------
- ``ValidationError``: the input is wrong (bad JSON, bad coordinate,
  bad configuration).  Never retryable.
- ``TransientError``: the source could not be reached this time
  (network failure, HTTP 5xx or 429).  Retryable.
- ``PermanentError``: the source does not exist or was refused
  (missing file, HTTP 4xx).  Not retryable.

``to_error_dict()`` gives the same keys for every error, for reports
and structured logs.
"""

from __future__ import annotations

from typing import ClassVar


class PipelineError(Exception):
    """Base exception for all ingestion errors.

    Attributes:
        message: Human-readable error description.
        stage: Where the error occurred
            (``"process_geojson"``, ``"load_geojson"``, ``"config"``).
        code: Machine-readable error code (e.g. ``"GEOJSON_PARSE_FAILED"``).
        retryable: Whether the caller should retry the operation.
        correlation_id: Caller-supplied run identifier, if any.
    """

    default_stage: ClassVar[str] = ""
    default_code: ClassVar[str] = ""
    #: ``None`` means "no fixed default", so ``retryable`` falls back to ``False``.
    default_retryable: ClassVar[bool | None] = None
    #: Set by the category bases; bare ``PipelineError`` derives it from ``retryable``.
    category_name: ClassVar[str | None] = None

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool | None = None,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        if retryable is None:
            retryable = bool(self.default_retryable)
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """``validation``, ``transient`` or ``permanent``."""
        if self.category_name is not None:
            return self.category_name
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input, document or configuration is invalid. Never retryable."""

    default_retryable = False
    category_name = "validation"


class TransientError(PipelineError):
    """Temporary failure that may succeed on retry."""

    default_retryable = True
    category_name = "transient"


class PermanentError(PipelineError):
    """The source is missing or refused. Not retryable."""

    default_retryable = False
    category_name = "permanent"
