"""Build error hierarchy.

Every stage raises a subclass of ``PipelineError``. Subclasses pin their
``stage`` and ``code`` as class attributes; the category base they derive
from says what kind of input was at fault:

- ``ValidationError``: the topology, catalog or configuration is malformed.
- ``ContractError``: a stage received a payload of the wrong shape.
- ``ResourceError``: a source or output file could not be read or written.

A build aborts on the first error and nothing is retried. The
orchestrator stamps ``run_id`` on errors that escape a build so the
reported failure matches the build's log lines.
"""

from __future__ import annotations

from typing import ClassVar


class PipelineError(Exception):
    """Base exception for all build errors.

    Attributes:
        message: Human-readable error description.
        stage: Build stage where the error occurred
            (e.g. ``"extract_topology"``, ``"build_registry"``).
        code: Machine-readable error code (e.g. ``"TOPOLOGY_INVALID"``).
        run_id: Identifier of the build run, empty outside a run.
    """

    category: ClassVar[str] = "build"
    default_stage: ClassVar[str] = ""
    default_code: ClassVar[str] = ""

    def __init__(self, message: str = "", *, stage: str = "", code: str = "") -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.run_id = ""
        super().__init__(message)

    def to_error_dict(self) -> dict[str, str]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "run_id": self.run_id,
        }


class ValidationError(PipelineError):
    """Malformed topology, catalog or configuration."""

    category = "validation"


class ContractError(PipelineError):
    """Payload handed between stages does not have the expected shape."""

    category = "contract"


class ResourceError(PipelineError):
    """A file could not be read or written."""

    category = "resource"
