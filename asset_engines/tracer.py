"""
asset_engines.tracer -- ``@traced_engine``, the ASSET_ENGINE_TRACE emitter.

Every decorated engine call leaves one log record on
``asset_kernel.engines.tracer`` with the engine name and version, a
fingerprint of the chosen inputs, the duration and the outcome ("ok", or
the exception class name when the engine raised).  Two valuations with the
same fingerprint received the same asset facts, category rule and date.

Invariants enforced:
    - Fingerprints are stable across runs: Money renders as "amount CODE",
      dataclasses as their fields in declaration order, mappings with
      sorted keys.  SHA-256, first 16 hex characters.
    - The decorator never alters arguments, results or raised exceptions.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from datetime import date
from enum import Enum
from typing import Any

from asset_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")


def _canonicalize(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "amount") and hasattr(value, "currency"):
        return f"{value.amount} {value.currency}"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        inner = ",".join(
            f"{f.name}:{_canonicalize(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__}({inner})"
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Hash the named arguments; a field not passed hashes as "null"."""
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine method so each call emits ASSET_ENGINE_TRACE.

    ``fingerprint_fields`` name parameters of the decorated function,
    positional or keyword; defaults that were not passed are not hashed.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            outcome = "ok"
            started = time.monotonic()
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                outcome = type(exc).__name__
                raise
            finally:
                _logger.info("ASSET_ENGINE_TRACE", extra={
                    "trace_type": "ASSET_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "function": func.__qualname__,
                    "input_fingerprint": fingerprint,
                    "outcome": outcome,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                })

        return wrapper

    return decorator
