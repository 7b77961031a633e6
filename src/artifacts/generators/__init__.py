"""Interceptor source generators."""

from artifacts.generators.interceptors import (
    EmissionResult,
    EmitOptions,
    InterceptorsGenerator,
    emit_interceptors,
)

__all__ = [
    "EmissionResult",
    "EmitOptions",
    "InterceptorsGenerator",
    "emit_interceptors",
]
