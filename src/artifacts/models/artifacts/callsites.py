"""Call-site records consumed by the interceptor emitter."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ids.formats import UniqueIdFormat


class SourceLocation(BaseModel):
    """Position of an invocation expression as reported by the host."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)
    line: int = Field(ge=0)
    column: int = Field(ge=0)


class ParameterInfo(BaseModel):
    """One declared parameter of the target method."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    has_default: bool = False
    default_literal: str | None = Field(
        default=None,
        description="Default value as host source text; None with has_default means null",
    )


class MarkedParameter(BaseModel):
    """A parameter that requests a synthesized literal."""

    model_config = ConfigDict(frozen=True)

    ordinal: int = Field(ge=0, description="Index into the full parameter list")
    format: UniqueIdFormat = UniqueIdFormat.GUID
    prefix: str | None = None
    # Reserved; every literal is deterministic regardless of this flag.
    deterministic: bool = True


class CallSiteRecord(BaseModel):
    """One intercepted call site."""

    model_config = ConfigDict(frozen=True)

    target_type: str
    method_name: str
    return_type: str
    is_static: bool = True
    location: SourceLocation
    location_key: str
    intercepts_data: str | None = None
    parameters: tuple[ParameterInfo, ...]
    marked_parameters: tuple[MarkedParameter, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_ordinals(self) -> CallSiteRecord:
        seen: set[int] = set()
        for marked in self.marked_parameters:
            if marked.ordinal >= len(self.parameters):
                msg = (
                    f"Marked ordinal {marked.ordinal} out of range for "
                    f"{len(self.parameters)} parameters"
                )
                raise ValueError(msg)
            if marked.ordinal in seen:
                msg = f"Duplicate marked ordinal {marked.ordinal}"
                raise ValueError(msg)
            seen.add(marked.ordinal)
        return self


__all__ = ["CallSiteRecord", "MarkedParameter", "ParameterInfo", "SourceLocation"]
