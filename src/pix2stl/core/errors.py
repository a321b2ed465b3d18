"""Error taxonomy for the image-to-STL pipeline.

Steps raise these; the pipeline runner turns them into a PipelineFailure
value at the boundary. Anything else that escapes a step is reported as
InternalError.
"""

from __future__ import annotations

from typing import ClassVar, Literal

FailureKind = Literal["DecodeError", "DegenerateInputError", "InternalError"]


class PipelineError(Exception):
    """Base class for all expected pipeline failures."""

    kind: ClassVar[FailureKind] = "InternalError"


class DecodeError(PipelineError):
    """Image bytes are empty, unsupported, unparseable, or decode to zero area."""

    kind: ClassVar[FailureKind] = "DecodeError"


class DegenerateInputError(PipelineError):
    """The field has no extractable feature and the caller asked for one."""

    kind: ClassVar[FailureKind] = "DegenerateInputError"


class InternalError(PipelineError):
    """Geometry or numeric invariant violated inside the pipeline."""

    kind: ClassVar[FailureKind] = "InternalError"
