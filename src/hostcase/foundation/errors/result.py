"""Request and result envelopes exchanged with callers.

A dispatch always concludes with exactly one ResultEnvelope: `ok=True` with
passthrough `data`, or `ok=False` with an ErrorRecord.
"""

from __future__ import annotations

from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ErrorRecord

JsonDict = dict[str, Any]


class RequestEnvelope(BaseModel):
    """One tool invocation as received from a caller."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tool_name: Annotated[str, Field(min_length=1)]
    params: Any = Field(default_factory=dict, description="Untyped input, validated at dispatch")


class ResultEnvelope(BaseModel):
    """Uniform outcome of a dispatch."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    ok: bool
    data: Any = None
    error: ErrorRecord | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> Self:
        if self.ok and self.error is not None:
            raise ValueError("successful envelope cannot carry an error")
        if not self.ok and self.error is None:
            raise ValueError("failed envelope requires an error record")
        return self

    @classmethod
    def success(cls, data: Any) -> Self:
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: ErrorRecord) -> Self:
        return cls(ok=False, error=error)

    def to_dict(self) -> JsonDict:
        """Wire form: `{ok, data}` or `{ok, error}`."""
        if self.ok:
            return {"ok": True, "data": self.data}
        assert self.error is not None
        return {"ok": False, "error": self.error.model_dump(mode="json", exclude_none=True)}
